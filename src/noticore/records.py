"""Validated stdin records — notifications and actions fed to the CLI.

One JSON object per line. Objects with an ``action`` key are ``ActionRecord``;
everything else is a ``NotificationRecord``. Unknown keys are ignored.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from noticore.config import NotiConfig
from noticore.lifecycle.notification import FullscreenMode, Notification, Urgency


class NotificationRecord(BaseModel):
    """A notification as submitted on stdin."""

    model_config = ConfigDict(extra="ignore")

    summary: str = ""
    body: str = ""
    appname: str = ""
    icon: str = ""
    category: str = ""
    msg: str | None = None
    id: int = Field(default=0, ge=0)
    urgency: Urgency = Urgency.NORMAL
    timeout: float | None = Field(default=None, ge=0)  # None = configured default
    progress: int = Field(default=-1, ge=-1, le=100)
    transient: bool = False
    history_ignore: bool = False
    fullscreen: FullscreenMode = FullscreenMode.SHOW
    script: str | None = None

    @field_validator("urgency", mode="before")
    @classmethod
    def _urgency_by_name(cls, value):
        if isinstance(value, str):
            try:
                return Urgency[value.upper()]
            except KeyError:
                raise ValueError(f"unknown urgency {value!r}") from None
        return value

    @field_validator("fullscreen", mode="before")
    @classmethod
    def _fullscreen_lowercase(cls, value):
        if isinstance(value, str):
            return value.lower()
        return value

    def to_notification(self, config: NotiConfig) -> Notification:
        """Build the engine notification, applying configured defaults."""
        fields = self.model_dump(
            exclude={"summary", "body"},
            exclude_none=True,
        )
        return Notification.create(self.summary, self.body, config=config, **fields)


class ActionRecord(BaseModel):
    """A control request: close, close_all, history_pop, pause or resume."""

    model_config = ConfigDict(extra="ignore")

    action: Literal["close", "close_all", "history_pop", "pause", "resume"]
    id: int = Field(default=0, ge=0)
