"""Bot configuration contracts.

Loaded once at startup and immutable afterwards (all models are frozen).
Weekdays use Python's numbering: 0=Monday .. 6=Sunday.
"""

from __future__ import annotations

from datetime import time
from typing import List, Literal
from zoneinfo import ZoneInfo

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ...util.time import parse_hhmm

WEEKDAY_NAMES = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")

TransportKind = Literal["twitch", "dry_run"]


class ConfigError(ValueError):
    """Raised only by strict config validation; the default loader falls back instead."""


def parse_weekday(raw: object) -> int:
    if isinstance(raw, bool):
        raise ValueError(f"invalid weekday: {raw!r}")
    if isinstance(raw, int):
        if 0 <= raw <= 6:
            return raw
        raise ValueError(f"weekday out of range: {raw} (expected 0-6)")
    s = str(raw or "").strip().lower()
    if s.isdigit():
        return parse_weekday(int(s))
    if len(s) >= 3 and s[:3] in WEEKDAY_NAMES:
        return WEEKDAY_NAMES.index(s[:3])
    raise ValueError(f"invalid weekday: {raw!r}")


class TimeWindowConfig(BaseModel):
    start: time = time(8, 45)
    end: time = time(14, 0)
    timezone: str = "America/Los_Angeles"
    weekdays: List[int] = Field(default_factory=lambda: [0, 1, 2, 3, 4])

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("start", "end", mode="before")
    @classmethod
    def _parse_clock(cls, v: object) -> object:
        if isinstance(v, time):
            return v
        parsed = parse_hhmm(v)
        if parsed is None:
            raise ValueError(f"invalid time of day: {v!r} (expected HH:MM)")
        return parsed

    @field_validator("timezone")
    @classmethod
    def _check_tz(cls, v: str) -> str:
        name = str(v or "").strip()
        try:
            ZoneInfo(name)
        except Exception as e:
            raise ValueError(f"unknown timezone: {v!r}") from e
        return name

    @field_validator("weekdays", mode="before")
    @classmethod
    def _parse_weekdays(cls, v: object) -> object:
        if isinstance(v, str):
            v = [p for p in v.split(",") if p.strip()]
        if not isinstance(v, (list, tuple, set)):
            raise ValueError("weekdays must be a list")
        return sorted({parse_weekday(x) for x in v})


class ScheduleConfig(BaseModel):
    send_interval_seconds: float = Field(default=30.1, gt=0)
    inactivity_threshold_seconds: float = Field(default=60.0, gt=0)
    # Record the bot as last sender after each send so the next inactivity
    # tick goes quiet unless the audience speaks again.
    track_self_send_as_activity: bool = True
    self_send_resets_timestamp: bool = False
    log_activity_transitions: bool = True

    model_config = ConfigDict(extra="forbid", frozen=True)


class TwitchCredentials(BaseModel):
    username: str = ""
    token: str = ""

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("username")
    @classmethod
    def _lower(cls, v: str) -> str:
        return str(v or "").strip().lower()

    def redacted(self) -> dict:
        return {"username": self.username, "token": "***" if self.token else ""}


class BotConfig(BaseModel):
    channels: List[str] = Field(default_factory=lambda: ["northernlion"], min_length=1)
    credentials: TwitchCredentials = Field(default_factory=TwitchCredentials)
    message: str = Field(default="Joel", min_length=1)
    ignore_list: List[str] = Field(default_factory=lambda: ["nightbot"])
    window: TimeWindowConfig = Field(default_factory=TimeWindowConfig)
    schedule: ScheduleConfig = Field(default_factory=ScheduleConfig)
    transport: TransportKind = "twitch"
    irc_host: str = "irc.chat.twitch.tv"
    irc_port: int = Field(default=6697, ge=1, le=65535)
    log_level: str = "INFO"

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("channels", mode="before")
    @classmethod
    def _normalize_channels(cls, v: object) -> object:
        if isinstance(v, str):
            v = v.split(",")
        if not isinstance(v, (list, tuple)):
            return v
        out: List[str] = []
        for item in v:
            name = str(item or "").strip().lstrip("#").lower()
            if name and name not in out:
                out.append(name)
        return out

    @field_validator("ignore_list", mode="before")
    @classmethod
    def _normalize_ignore(cls, v: object) -> object:
        if isinstance(v, str):
            v = v.split(",")
        if not isinstance(v, (list, tuple, set)):
            return v
        return [str(x).strip().lower() for x in v if str(x or "").strip()]

    @property
    def bot_identity(self) -> str:
        return self.credentials.username
