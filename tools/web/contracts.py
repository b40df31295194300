"""Data contracts for the web search stage."""

from dataclasses import dataclass
from enum import Enum

from models.search_result import SourceDocument


class OutcomeKind(str, Enum):
    OK = "ok"
    CLIENT_FAULT = "client_fault"  # 4xx, never retried
    SERVER_FAULT = "server_fault"  # 5xx, network failure, malformed body
    TIMEOUT_FAULT = "timeout_fault"


RETRYABLE_KINDS = frozenset({OutcomeKind.SERVER_FAULT, OutcomeKind.TIMEOUT_FAULT})


@dataclass(frozen=True)
class SearchOutcome:
    """Tagged result of one call to the search provider."""

    kind: OutcomeKind
    sources: tuple[SourceDocument, ...] = ()
    status_code: int | None = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.OK

    @property
    def retryable(self) -> bool:
        return self.kind in RETRYABLE_KINDS

    @classmethod
    def success(cls, sources, status_code: int = 200) -> "SearchOutcome":
        return cls(kind=OutcomeKind.OK, sources=tuple(sources), status_code=status_code)

    @classmethod
    def client_fault(cls, status_code: int, detail: str = "") -> "SearchOutcome":
        return cls(kind=OutcomeKind.CLIENT_FAULT, status_code=status_code, detail=detail)

    @classmethod
    def server_fault(cls, detail: str, status_code: int | None = None) -> "SearchOutcome":
        return cls(kind=OutcomeKind.SERVER_FAULT, status_code=status_code, detail=detail)

    @classmethod
    def timeout_fault(cls, detail: str = "") -> "SearchOutcome":
        return cls(kind=OutcomeKind.TIMEOUT_FAULT, detail=detail)
