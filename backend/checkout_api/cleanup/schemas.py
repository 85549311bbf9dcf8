"""Pydantic schemas for the draft order cleanup sweep."""

from datetime import datetime
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, Field

DeletionStatus = Literal["deleted", "failed", "error"]


class CleanupDetail(BaseModel):
    """Outcome of one deletion attempt."""
    id: Any
    name: Optional[str] = None
    created_at: Optional[str] = None
    status: DeletionStatus
    error: Optional[Any] = None


class CleanupResult(BaseModel):
    """Everything one sweep did. Logged in full; only counts reach the caller."""
    cutoff_time: datetime
    checked: int = 0
    deleted: int = 0
    failed: int = 0
    details: List[CleanupDetail] = Field(default_factory=list)

    def record(self, detail: CleanupDetail) -> None:
        if detail.status == "deleted":
            self.deleted += 1
        else:
            self.failed += 1
        self.details.append(detail)


class CleanupSummary(BaseModel):
    total_checked: int
    deleted: int
    failed: int


class CleanupResponse(BaseModel):
    success: bool = True
    message: str = "Draft order cleanup complete"
    timestamp: str
    cutoff_time: str
    results: CleanupSummary


class CleanupDescription(BaseModel):
    """Static answer for unauthenticated GETs."""
    status: str = "ok"
    message: str = "Draft order cleanup endpoint"
    description: str
    schedule: str
