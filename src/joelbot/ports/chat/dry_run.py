from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from .base import ChatTransport, EventSink

logger = logging.getLogger("joelbot.ports.chat.dry_run")


class DryRunTransport(ChatTransport):
    """Never connects; records and logs what would have been sent."""

    def __init__(self, *, channels: Sequence[str] = ()) -> None:
        self.channels = list(channels)
        self.sink: Optional[EventSink] = None
        self.sent: List[Tuple[str, str]] = []

    def connect(self, sink: EventSink) -> None:
        self.sink = sink
        logger.info("dry-run transport ready", extra={"channels": self.channels})

    def send(self, channel: str, text: str) -> None:
        self.sent.append((channel, text))
        logger.info("dry-run send to %s: %s", channel, text)
