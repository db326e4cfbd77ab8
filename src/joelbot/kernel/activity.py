"""Stream activity tracking.

The channel counts as active while a qualifying (non-ignored) chat message
arrived within the inactivity threshold and the last recorded sender is not
the bot itself. Inbound messages switch it on immediately; only the periodic
inactivity tick switches it off.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, Iterable, Optional

from ..contracts.v1 import InboundMessageEvent
from ..util.time import ensure_aware, utc_now
from .filter import should_ignore

logger = logging.getLogger("joelbot.activity")

Clock = Callable[[], datetime]


@dataclass
class ActivityState:
    last_message_at: datetime
    last_sender: str = ""
    is_active: bool = True


class ActivityTracker:
    def __init__(
        self,
        *,
        bot_identity: str,
        ignore_list: Iterable[str],
        inactivity_threshold_seconds: float,
        track_self_send: bool = True,
        self_send_resets_timestamp: bool = False,
        log_transitions: bool = True,
        clock: Optional[Clock] = None,
    ) -> None:
        self._clock: Clock = clock or utc_now
        self.bot_identity = str(bot_identity or "").strip().lower()
        self.ignore_list = [str(x).strip().lower() for x in ignore_list]
        self.threshold_seconds = float(inactivity_threshold_seconds)
        self.track_self_send = bool(track_self_send)
        self.self_send_resets_timestamp = bool(self_send_resets_timestamp)
        self.log_transitions = bool(log_transitions)
        self.state = ActivityState(last_message_at=self._now())

    def _now(self) -> datetime:
        return ensure_aware(self._clock())

    @property
    def is_active(self) -> bool:
        return self.state.is_active

    def snapshot(self) -> ActivityState:
        return replace(self.state)

    def _set_active(self, value: bool) -> None:
        was = self.state.is_active
        self.state.is_active = bool(value)
        if was != self.state.is_active and self.log_transitions:
            logger.info(
                "Stream activity status changed: %s.",
                "active" if self.state.is_active else "inactive",
                extra={"last_sender": self.state.last_sender},
            )

    def on_inbound_message(self, event: InboundMessageEvent) -> bool:
        """Apply a chat line; returns True when it qualified as activity."""
        if should_ignore(event, self.bot_identity, self.ignore_list):
            logger.debug("ignored message from %s", event.sender)
            return False
        self.state.last_message_at = self._now()
        self.state.last_sender = str(event.sender or "")
        self._set_active(True)
        return True

    def on_inactivity_tick(self) -> bool:
        elapsed = (self._now() - self.state.last_message_at).total_seconds()
        recent = elapsed <= self.threshold_seconds
        self_sent = bool(self.bot_identity) and self.state.last_sender.strip().lower() == self.bot_identity
        self._set_active(recent and not self_sent)
        return self.state.is_active

    def on_self_send(self) -> None:
        if not self.track_self_send:
            return
        self.state.last_sender = self.bot_identity
        if self.self_send_resets_timestamp:
            self.state.last_message_at = self._now()
