import threading
import time
import unittest


class TestTimerThreads(unittest.TestCase):
    def test_timer_fires_repeatedly_until_stopped(self) -> None:
        from joelbot.daemon.timers import start_timer_thread

        stop = threading.Event()
        fired = []
        t = start_timer_thread(stop_event=stop, interval_s=0.01, fire=lambda: fired.append(1), name="test-timer")
        deadline = time.time() + 2.0
        while len(fired) < 3 and time.time() < deadline:
            time.sleep(0.01)
        stop.set()
        t.join(timeout=1.0)
        self.assertGreaterEqual(len(fired), 3)
        self.assertFalse(t.is_alive())

    def test_failing_callback_does_not_kill_timer(self) -> None:
        from joelbot.daemon.timers import start_timer_thread

        stop = threading.Event()
        calls = []

        def _fire() -> None:
            calls.append(1)
            raise RuntimeError("boom")

        with self.assertLogs("joelbot.daemon.timers", level="ERROR"):
            t = start_timer_thread(stop_event=stop, interval_s=0.01, fire=_fire, name="test-boom")
            deadline = time.time() + 2.0
            while len(calls) < 2 and time.time() < deadline:
                time.sleep(0.01)
            stop.set()
            t.join(timeout=1.0)
        self.assertGreaterEqual(len(calls), 2)

    def test_timer_posts_ticks_onto_scheduler_queue(self) -> None:
        from joelbot.contracts.v1 import BotConfig
        from joelbot.daemon.scheduler import Scheduler, tick_poster
        from joelbot.daemon.timers import start_timer_thread
        from joelbot.ports.chat import DryRunTransport

        sched = Scheduler(BotConfig(transport="dry_run"), DryRunTransport())
        stop = threading.Event()
        t = start_timer_thread(stop_event=stop, interval_s=0.01, fire=tick_poster(sched, "tick.inactivity"), name="t")
        deadline = time.time() + 2.0
        while sched.pending() < 1 and time.time() < deadline:
            time.sleep(0.01)
        stop.set()
        t.join(timeout=1.0)
        self.assertGreaterEqual(sched.pending(), 1)


if __name__ == "__main__":
    unittest.main()
