"""DispatchResult frozen dataclass."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class DispatchResult:
    """Outcome of running one request through the pipeline.

    ``handled`` is true when a main route handled the request.
    ``suppress_body`` is true for HEAD requests; emitters send the
    status and headers of ``response`` but not its body.
    """

    handled: bool
    response: Any
    suppress_body: bool = False
    method: str = "GET"
    path: str = "/"

    @property
    def status(self) -> int:
        return self.response.status
