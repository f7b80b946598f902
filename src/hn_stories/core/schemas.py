"""
Pydantic models for the aggregation results.
Why: immutable stories and a fixed page shape shared by the core and the API.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Story(BaseModel):
    """A resolved upstream story. Missing title/url are legitimate values."""

    model_config = ConfigDict(frozen=True)

    id: int
    title: Optional[str] = None
    url: Optional[str] = None
    author: str = ""
    created_at: int = Field(default=0, description="Unix seconds")


class PagedResult(BaseModel):
    """One page of stories.

    `total` counts against the ID list (no search) or the matches inside the
    search window; `items` only holds IDs that resolved on this page, so the
    two need not agree.
    """

    model_config = ConfigDict(frozen=True)

    total: int = Field(ge=0)
    items: List[Story] = Field(default_factory=list)


class ProblemDetails(BaseModel):
    title: str
    status: int
    detail: str
