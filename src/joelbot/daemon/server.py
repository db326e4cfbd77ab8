from __future__ import annotations

import logging
import signal
import threading
from typing import Any, List, Optional

from .. import __version__
from ..contracts.v1 import BotConfig, StopEvent
from ..kernel.activity import Clock
from ..ports.chat import ChatTransport, build_transport
from .scheduler import Scheduler, tick_poster
from .timers import start_timer_thread

logger = logging.getLogger("joelbot.daemon.server")


def _install_signal_handlers(stop_event: threading.Event, scheduler: Scheduler) -> None:
    if threading.current_thread() is not threading.main_thread():
        return

    def _signal_handler(signum: int, frame: Any) -> None:
        logger.info("received signal %s, stopping", signum)
        stop_event.set()
        scheduler.post(StopEvent())

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            signal.signal(sig, _signal_handler)
        except Exception:
            pass


def start_timers(scheduler: Scheduler, stop_event: threading.Event) -> List[threading.Thread]:
    sched = scheduler.config.schedule
    return [
        start_timer_thread(
            stop_event=stop_event,
            interval_s=sched.send_interval_seconds,
            fire=tick_poster(scheduler, "tick.send"),
            name="joelbot-send-timer",
        ),
        start_timer_thread(
            stop_event=stop_event,
            interval_s=sched.inactivity_threshold_seconds,
            fire=tick_poster(scheduler, "tick.inactivity"),
            name="joelbot-inactivity-timer",
        ),
    ]


def serve_forever(
    config: BotConfig,
    *,
    transport: Optional[ChatTransport] = None,
    stop_event: Optional[threading.Event] = None,
    install_signals: bool = True,
    clock: Optional[Clock] = None,
) -> int:
    stop = stop_event or threading.Event()
    chat = transport or build_transport(config)
    scheduler = Scheduler(config, chat, clock=clock)

    logger.info(
        "joelbot %s starting",
        __version__,
        extra={
            "channels": config.channels,
            "transport": config.transport,
            "send_interval_s": config.schedule.send_interval_seconds,
            "inactivity_threshold_s": config.schedule.inactivity_threshold_seconds,
            "window": f"{config.window.start.isoformat('minutes')}-{config.window.end.isoformat('minutes')} {config.window.timezone}",
        },
    )

    try:
        chat.connect(scheduler.post)
    except Exception as e:
        # Keep scheduling anyway; sends will fail and be ignored.
        logger.error("chat connection failed: %s", e)

    if install_signals:
        _install_signal_handlers(stop, scheduler)

    try:
        scheduler.attempt_send()
        start_timers(scheduler, stop)
        scheduler.run(stop)
    except KeyboardInterrupt:
        logger.info("keyboard interrupt received")
    finally:
        stop.set()
        try:
            chat.close()
        except Exception:
            pass
        logger.info("joelbot stopped", extra={"sends_total": scheduler.sends_total})
    return 0
