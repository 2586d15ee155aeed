"""
Test doubles shared across the suite.
"""

from typing import Any, Dict, List, Optional


class FakeReplicate:
    """Stand-in for `infer.run_model` that records every payload.

    `outcomes` are consumed one per call: an exception instance is raised,
    anything else is returned as the raw output. Once exhausted, each call
    returns one URL per requested output.
    """

    def __init__(self, outcomes: Optional[List[Any]] = None):
        self.outcomes = list(outcomes or [])
        self.calls: List[tuple] = []
        self._counter = 0

    def __call__(self, model_ref: str, payload: Dict[str, Any]) -> Any:
        self.calls.append((model_ref, dict(payload)))
        if self.outcomes:
            outcome = self.outcomes.pop(0)
            if isinstance(outcome, BaseException):
                raise outcome
            return outcome
        urls = []
        for _ in range(payload.get("num_outputs", 1)):
            self._counter += 1
            urls.append(f"https://replicate.delivery/out-{self._counter}.png")
        return urls

    @property
    def batch_sizes(self) -> List[int]:
        return [payload.get("num_outputs") for _, payload in self.calls]
