from __future__ import annotations

import logging
import threading
from typing import Callable

logger = logging.getLogger("joelbot.daemon.timers")


def start_timer_thread(
    *,
    stop_event: threading.Event,
    interval_s: float,
    fire: Callable[[], None],
    name: str,
) -> threading.Thread:
    """Call ``fire`` every ``interval_s`` seconds until ``stop_event`` is set.

    The first call happens one full interval after start.
    """
    interval = max(0.01, float(interval_s))

    def _timer_loop() -> None:
        while not stop_event.wait(interval):
            try:
                fire()
            except Exception:
                logger.exception("timer %s callback failed", name)

    t = threading.Thread(target=_timer_loop, name=name, daemon=True)
    t.start()
    return t
