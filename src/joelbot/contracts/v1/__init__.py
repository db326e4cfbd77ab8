from .config import (
    WEEKDAY_NAMES,
    BotConfig,
    ConfigError,
    ScheduleConfig,
    TimeWindowConfig,
    TransportKind,
    TwitchCredentials,
    parse_weekday,
)
from .events import InboundMessageEvent, QueueEvent, StopEvent, TickEvent, TickKind

__all__ = [
    "WEEKDAY_NAMES",
    "BotConfig",
    "ConfigError",
    "ScheduleConfig",
    "TimeWindowConfig",
    "TransportKind",
    "TwitchCredentials",
    "parse_weekday",
    "InboundMessageEvent",
    "QueueEvent",
    "StopEvent",
    "TickEvent",
    "TickKind",
]
