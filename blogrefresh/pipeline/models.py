"""Job reports and per-record outcomes."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class LinkStatus(str, Enum):
    """What the discovery job did with a selected link."""

    SAVED = "saved"
    EXISTING = "existing"
    EMPTY = "empty"


class LinkOutcome(BaseModel):
    """Discovery result for one article link."""

    title: str
    url: str
    status: LinkStatus
    article_id: Optional[int] = None
    content_chars: int = 0
    error: Optional[str] = None


class DiscoveryReport(BaseModel):
    """Summary of a discovery run."""

    last_page: int = Field(..., description="Last listing page found")
    pages_fetched: int = Field(0, description="Listing pages fetched")
    outcomes: List[LinkOutcome] = Field(default_factory=list)
    duration: float = Field(0.0, description="Run time in seconds")

    def count(self, status: LinkStatus) -> int:
        """Number of links that ended with the given status."""
        return sum(1 for outcome in self.outcomes if outcome.status == status)


class RefreshState(str, Enum):
    """States a record passes through in the refresh job."""

    PENDING = "pending"
    SEARCHING = "searching"
    SCRAPING_REFERENCES = "scraping_references"
    REWRITING = "rewriting"
    SAVED = "saved"
    SKIPPED = "skipped"

    @property
    def is_terminal(self) -> bool:
        return self in (RefreshState.SAVED, RefreshState.SKIPPED)


TRANSITIONS = {
    RefreshState.PENDING: {RefreshState.SEARCHING, RefreshState.SKIPPED},
    RefreshState.SEARCHING: {RefreshState.SCRAPING_REFERENCES, RefreshState.SKIPPED},
    RefreshState.SCRAPING_REFERENCES: {RefreshState.REWRITING, RefreshState.SKIPPED},
    RefreshState.REWRITING: {RefreshState.SAVED, RefreshState.SKIPPED},
    RefreshState.SAVED: set(),
    RefreshState.SKIPPED: set(),
}


class InvalidTransition(Exception):
    """Raised when a record is moved along an edge the state machine lacks."""


class RecordOutcome(BaseModel):
    """Refresh progress for one record."""

    article_id: int
    title: str
    state: RefreshState = RefreshState.PENDING
    skipped_from: Optional[RefreshState] = None
    reason: Optional[str] = None
    references: List[str] = Field(default_factory=list)
    content_chars: int = 0
    dry_run: bool = False

    def advance(self, state: RefreshState) -> None:
        """Move to the next state."""
        if state not in TRANSITIONS[self.state]:
            raise InvalidTransition(f"{self.state.value} -> {state.value}")
        self.state = state

    def skip(self, reason: str) -> None:
        """Short-circuit to SKIPPED from the current state."""
        previous = self.state
        self.advance(RefreshState.SKIPPED)
        self.skipped_from = previous
        self.reason = reason


class RefreshReport(BaseModel):
    """Summary of a refresh run."""

    candidates: int = Field(0, description="Records eligible for refresh")
    outcomes: List[RecordOutcome] = Field(default_factory=list)
    tokens_used: int = Field(0, description="LLM tokens used")
    duration: float = Field(0.0, description="Run time in seconds")

    def count(self, state: RefreshState) -> int:
        """Number of records that ended in the given state."""
        return sum(1 for outcome in self.outcomes if outcome.state == state)
