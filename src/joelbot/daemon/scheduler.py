"""Activity-gated send scheduler.

Every mutation of activity state happens on the thread that consumes the
scheduler queue. Producers (chat reader, timers) only ``post`` events, so
inbound messages are applied before any send tick queued after them.

A send tick sends only while the stream is active and the clock is inside
the posting window; both are evaluated fresh on each tick.
"""
from __future__ import annotations

import logging
import queue
import threading
from datetime import datetime
from typing import Callable, Optional

from ..contracts.v1 import BotConfig, InboundMessageEvent, QueueEvent, StopEvent, TickEvent
from ..kernel.activity import ActivityTracker, Clock
from ..kernel.window import is_within_window, local_now
from ..ports.chat import ChatTransport
from ..util.time import ensure_aware, format_clock, utc_now

logger = logging.getLogger("joelbot.daemon.scheduler")


class Scheduler:
    def __init__(
        self,
        config: BotConfig,
        transport: ChatTransport,
        *,
        clock: Optional[Clock] = None,
        tracker: Optional[ActivityTracker] = None,
    ) -> None:
        self.config = config
        self.transport = transport
        self._clock: Clock = clock or utc_now
        self.tracker = tracker or ActivityTracker(
            bot_identity=config.bot_identity,
            ignore_list=config.ignore_list,
            inactivity_threshold_seconds=config.schedule.inactivity_threshold_seconds,
            track_self_send=config.schedule.track_self_send_as_activity,
            self_send_resets_timestamp=config.schedule.self_send_resets_timestamp,
            log_transitions=config.schedule.log_activity_transitions,
            clock=self._clock,
        )
        self._queue: "queue.Queue[QueueEvent]" = queue.Queue()
        self.sends_total = 0

    def _now(self) -> datetime:
        return ensure_aware(self._clock())

    # ---- queue ----

    def post(self, event: QueueEvent) -> None:
        """Enqueue an event; safe to call from any thread."""
        self._queue.put(event)

    def pending(self) -> int:
        return self._queue.qsize()

    def handle(self, event: QueueEvent) -> bool:
        """Apply one event. Returns False for ``StopEvent``."""
        if isinstance(event, StopEvent):
            return False
        if isinstance(event, InboundMessageEvent):
            self.tracker.on_inbound_message(event)
        elif isinstance(event, TickEvent):
            if event.kind == "tick.send":
                self.attempt_send()
            elif event.kind == "tick.inactivity":
                self.tracker.on_inactivity_tick()
        return True

    def drain(self) -> int:
        """Process everything already queued without blocking. Returns the count handled."""
        handled = 0
        while True:
            try:
                event = self._queue.get_nowait()
            except queue.Empty:
                return handled
            handled += 1
            if not self.handle(event):
                return handled

    def run(self, stop_event: threading.Event, *, poll_s: float = 0.5) -> None:
        """Consume events until ``StopEvent`` arrives or ``stop_event`` is set."""
        while not stop_event.is_set():
            try:
                event = self._queue.get(timeout=poll_s)
            except queue.Empty:
                continue
            try:
                if not self.handle(event):
                    return
            except Exception:
                logger.exception("scheduler failed to handle %s", getattr(event, "kind", "?"))

    # ---- decisions ----

    def can_send(self, now: Optional[datetime] = None) -> bool:
        at = ensure_aware(now) if now is not None else self._now()
        return self.tracker.is_active and is_within_window(at, self.config.window)

    def attempt_send(self) -> int:
        """One send-attempt: message every channel if active and inside the window."""
        now = self._now()
        if not self.can_send(now):
            logger.debug(
                "send skipped",
                extra={"active": self.tracker.is_active, "in_window": is_within_window(now, self.config.window)},
            )
            return 0
        message = self.config.message
        stamp = format_clock(local_now(now, self.config.window))
        sent = 0
        for channel in self.config.channels:
            logger.info("%s '%s': \"%s\".", stamp, channel, message)
            try:
                self.transport.send(channel, message)
            except Exception as e:
                logger.warning("send to %s failed: %s", channel, e)
                continue
            sent += 1
            self.tracker.on_self_send()
        self.sends_total += sent
        return sent


def tick_poster(scheduler: Scheduler, kind: str) -> Callable[[], None]:
    def _post() -> None:
        scheduler.post(TickEvent(kind=kind))  # type: ignore[arg-type]

    return _post
