from __future__ import annotations

from ...contracts.v1 import BotConfig
from .base import ChatTransport, EventSink
from .dry_run import DryRunTransport
from .twitch_irc import TwitchIrcTransport


def build_transport(config: BotConfig) -> ChatTransport:
    if config.transport == "dry_run":
        return DryRunTransport(channels=config.channels)
    return TwitchIrcTransport(
        username=config.credentials.username,
        token=config.credentials.token,
        channels=config.channels,
        host=config.irc_host,
        port=config.irc_port,
    )


__all__ = ["ChatTransport", "EventSink", "DryRunTransport", "TwitchIrcTransport", "build_transport"]
