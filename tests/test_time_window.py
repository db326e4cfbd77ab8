import unittest
from datetime import datetime, timezone

from joelbot.contracts.v1 import TimeWindowConfig
from joelbot.kernel.window import is_within_window, window_bounds


def _utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


class TestTimeWindow(unittest.TestCase):
    # 2024-06-04 is a Tuesday; Los Angeles is UTC-7 (PDT) that day.

    def test_inside_window_on_weekday(self) -> None:
        cfg = TimeWindowConfig()
        self.assertTrue(is_within_window(_utc(2024, 6, 4, 16, 0), cfg))  # 09:00 local

    def test_start_boundary_is_inclusive(self) -> None:
        cfg = TimeWindowConfig()
        self.assertTrue(is_within_window(_utc(2024, 6, 4, 15, 45, 0), cfg))  # 08:45:00
        self.assertFalse(is_within_window(_utc(2024, 6, 4, 15, 44, 59), cfg))

    def test_end_boundary_is_inclusive(self) -> None:
        cfg = TimeWindowConfig()
        self.assertTrue(is_within_window(_utc(2024, 6, 4, 21, 0, 0), cfg))  # 14:00:00
        self.assertFalse(is_within_window(_utc(2024, 6, 4, 21, 0, 1), cfg))

    def test_afternoon_outside_window(self) -> None:
        cfg = TimeWindowConfig()
        self.assertFalse(is_within_window(_utc(2024, 6, 4, 22, 0), cfg))  # 15:00 local

    def test_weekend_is_outside_window(self) -> None:
        cfg = TimeWindowConfig()
        self.assertFalse(is_within_window(_utc(2024, 6, 8, 17, 0), cfg))  # Saturday 10:00
        self.assertFalse(is_within_window(_utc(2024, 6, 9, 17, 0), cfg))  # Sunday 10:00

    def test_weekday_is_evaluated_in_local_time(self) -> None:
        cfg = TimeWindowConfig(start="00:00", end="23:59")
        # Saturday 02:00 UTC is still Friday 19:00 in Los Angeles.
        self.assertTrue(is_within_window(_utc(2024, 6, 8, 2, 0), cfg))

    def test_naive_datetime_is_taken_as_utc(self) -> None:
        cfg = TimeWindowConfig()
        self.assertTrue(is_within_window(datetime(2024, 6, 4, 16, 0), cfg))
        self.assertFalse(is_within_window(datetime(2024, 6, 4, 9, 0), cfg))

    def test_standard_time_offset(self) -> None:
        cfg = TimeWindowConfig()
        # 2024-01-09 is a Tuesday; PST is UTC-8.
        self.assertTrue(is_within_window(_utc(2024, 1, 9, 17, 0), cfg))  # 09:00 PST
        self.assertFalse(is_within_window(_utc(2024, 1, 9, 16, 30), cfg))  # 08:30 PST

    def test_weekday_names_and_custom_zone(self) -> None:
        cfg = TimeWindowConfig(start="10:00", end="11:00", timezone="Europe/Berlin", weekdays=["sat", "Sunday"])
        self.assertEqual(cfg.weekdays, [5, 6])
        self.assertTrue(is_within_window(_utc(2024, 6, 8, 8, 30), cfg))  # Saturday 10:30 CEST
        self.assertFalse(is_within_window(_utc(2024, 6, 4, 8, 30), cfg))  # Tuesday

    def test_window_bounds_are_local(self) -> None:
        cfg = TimeWindowConfig()
        start, end = window_bounds(_utc(2024, 6, 4, 16, 0), cfg)
        self.assertEqual((start.hour, start.minute), (8, 45))
        self.assertEqual((end.hour, end.minute), (14, 0))
        self.assertEqual(start.utcoffset().total_seconds(), -7 * 3600)

    def test_invalid_window_values_are_rejected_by_contract(self) -> None:
        from pydantic import ValidationError

        with self.assertRaises(ValidationError):
            TimeWindowConfig(start="25:00")
        with self.assertRaises(ValidationError):
            TimeWindowConfig(timezone="Mars/Olympus_Mons")
        with self.assertRaises(ValidationError):
            TimeWindowConfig(weekdays=["funday"])


if __name__ == "__main__":
    unittest.main()
