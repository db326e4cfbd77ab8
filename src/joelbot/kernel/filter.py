from __future__ import annotations

from typing import Iterable

from ..contracts.v1 import InboundMessageEvent

COMMAND_PREFIX = "!"


def should_ignore(event: InboundMessageEvent, bot_identity: str, ignore_list: Iterable[str]) -> bool:
    """Whether an inbound chat line must not count as audience activity.

    Moderators, listed bots, the bot itself and ``!command`` invocations are
    all ignored.
    """
    if event.is_moderator:
        return True
    sender = str(event.sender or "").strip().lower()
    if sender in {str(name or "").strip().lower() for name in ignore_list}:
        return True
    if sender and sender == str(bot_identity or "").strip().lower():
        return True
    return str(event.text or "").startswith(COMMAND_PREFIX)
