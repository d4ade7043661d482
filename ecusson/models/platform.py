"""
Platform Payload Models

Small payloads exchanged with host services: the live activity state,
the widget refresh signal and scheduled reminder requests.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ecusson.models.ledger import SpendSummary


class LiveActivityState(BaseModel):
    """State pushed to the live activity surface."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    today_total: int = Field(
        ...,
        alias="todayTotal",
        description="Running total for today"
    )


class WidgetRefreshSignal(BaseModel):
    """
    Last refresh request issued to the widget host.

    `generation` only ever grows; readers compare it with the generation
    they last rendered to decide whether to re-read the ledger.
    """

    generation: int = Field(
        default=0,
        ge=0,
        description="Number of refresh requests issued so far"
    )
    kind: Optional[str] = Field(
        default=None,
        description="Widget kind of the last request (None reloads all kinds)"
    )
    requested_at: Optional[datetime] = None


class ReminderRequest(BaseModel):
    """A daily-recurring, time-of-day triggered local notification."""
    model_config = ConfigDict(str_strip_whitespace=True)

    identifier: str = Field(
        ...,
        min_length=1,
        description="Identifier used to detect duplicates"
    )
    title: str = Field(default="")
    body: str = Field(default="")
    hour: int = Field(..., ge=0, le=23)
    minute: int = Field(default=0, ge=0, le=59)
    repeats: bool = Field(default=True)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )


class LiveActivitySession(BaseModel):
    """A running live activity as recorded by the shared channel."""

    state: LiveActivityState
    started_at: datetime
    updated_at: datetime
    update_count: int = Field(default=1, ge=1)


class WidgetEntry(BaseModel):
    """One rendered widget timeline entry."""
    model_config = ConfigDict(frozen=True)

    rendered_at: datetime
    summary: SpendSummary
    generation: int = Field(
        default=0,
        ge=0,
        description="Refresh signal generation the entry was rendered for"
    )
