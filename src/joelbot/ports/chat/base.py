from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

from ...contracts.v1 import InboundMessageEvent

EventSink = Callable[[InboundMessageEvent], None]


class ChatTransport(ABC):
    """Connection to a chat service.

    ``connect`` starts delivering inbound chat lines to ``sink`` (from any
    thread). ``send`` is fire-and-forget; it may raise on a broken connection
    and callers decide whether that matters.
    """

    @abstractmethod
    def connect(self, sink: EventSink) -> None:
        ...

    @abstractmethod
    def send(self, channel: str, text: str) -> None:
        ...

    def close(self) -> None:
        pass
