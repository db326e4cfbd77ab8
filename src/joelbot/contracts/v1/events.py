"""Events consumed by the scheduler queue.

Producers (transport reader, timer threads) only build these; the scheduler
is the single consumer.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from ...util.time import utc_now

TickKind = Literal["tick.send", "tick.inactivity"]


class InboundMessageEvent(BaseModel):
    kind: Literal["chat.message"] = "chat.message"
    channel: str = ""
    sender: str = ""
    text: str = ""
    is_moderator: bool = False
    received_at: datetime = Field(default_factory=utc_now)

    model_config = ConfigDict(extra="forbid", frozen=True)


class TickEvent(BaseModel):
    kind: TickKind
    fired_at: datetime = Field(default_factory=utc_now)

    model_config = ConfigDict(extra="forbid", frozen=True)


class StopEvent(BaseModel):
    kind: Literal["stop"] = "stop"

    model_config = ConfigDict(extra="forbid", frozen=True)


QueueEvent = Annotated[
    Union[InboundMessageEvent, TickEvent, StopEvent],
    Field(discriminator="kind"),
]
