from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional
from pydantic import BaseModel, Field


class SeedStatus(str, Enum):
    COMPLETED = "completed"
    FAILED = "failed"    # Unexpected error; backend is left partially seeded
    ABORTED = "aborted"  # Reset failed and the run was configured to stop


class ItemOutcome(str, Enum):
    CREATED = "created"
    SKIPPED = "skipped"


class SkipReason(str, Enum):
    CATEGORY_NOT_FOUND = "category_not_found"
    IMAGE_UPLOAD_FAILED = "image_upload_failed"
    CUSTOMIZATION_NOT_FOUND = "customization_not_found"


class LinkSkip(BaseModel):
    customization_name: str
    reason: SkipReason = SkipReason.CUSTOMIZATION_NOT_FOUND


class MenuItemResult(BaseModel):
    """Outcome of seeding one menu item and its customization links."""
    name: str
    outcome: ItemOutcome
    reason: Optional[SkipReason] = None
    document_id: Optional[str] = None
    image_url: Optional[str] = None
    link_ids: List[str] = Field(default_factory=list)
    skipped_links: List[LinkSkip] = Field(default_factory=list)

    @classmethod
    def skipped(cls, name: str, reason: SkipReason) -> "MenuItemResult":
        return cls(name=name, outcome=ItemOutcome.SKIPPED, reason=reason)


class SeedCounts(BaseModel):
    categories: int = 0
    customizations: int = 0
    menu: int = 0
    menu_customizations: int = 0
    files: int = 0


class SeedReport(BaseModel):
    """Summary of one seed run, returned by run_seed and the /seed/run endpoint."""
    status: SeedStatus = SeedStatus.COMPLETED
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: Optional[datetime] = None
    created: SeedCounts = Field(default_factory=SeedCounts)
    category_ids: Dict[str, str] = Field(default_factory=dict)
    customization_ids: Dict[str, str] = Field(default_factory=dict)
    items: List[MenuItemResult] = Field(default_factory=list)
    reset_failures: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    error: Optional[str] = None
