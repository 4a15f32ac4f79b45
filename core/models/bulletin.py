# =============================================================================
# core/models/bulletin.py - Bulletin Board Schemas
# =============================================================================

from pydantic import BaseModel, Field


class BulletinPostCreate(BaseModel):
    """
    A new announcement.

    `required_departments` limits who must acknowledge it; an empty list
    means everyone.
    """
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)
    category: str = Field(default="General")
    requires_acknowledgment: bool = False
    required_departments: list[str] = Field(default_factory=list)


class AcknowledgmentCreate(BaseModel):
    summary: str = Field(
        ...,
        min_length=1,
        description="The employee's own summary of what the post asks of them",
    )
