import datetime
import unittest

from calendar_events import holidays as holidays_module
from calendar_events.holidays import (
    calculate_easter,
    find_holiday,
    holidays_for_range,
    holidays_for_year,
)


class TestCalculateEaster(unittest.TestCase):
    def test_known_easter_dates(self):
        expected = {
            2020: datetime.date(2020, 4, 12),
            2021: datetime.date(2021, 4, 4),
            2022: datetime.date(2022, 4, 17),
            2023: datetime.date(2023, 4, 9),
            2024: datetime.date(2024, 3, 31),
            2025: datetime.date(2025, 4, 20),
            2026: datetime.date(2026, 4, 5),
            2027: datetime.date(2027, 3, 28),
        }
        for year, easter in expected.items():
            with self.subTest(year=year):
                self.assertEqual(calculate_easter(year), easter)

    def test_easter_is_always_a_sunday(self):
        for year in range(1900, 2100):
            self.assertEqual(calculate_easter(year).weekday(), 6, year)


class TestHolidaysForYear(unittest.TestCase):
    def test_2026_holidays(self):
        dates = [h.date for h in holidays_for_year(2026)]
        self.assertEqual(
            dates,
            [
                "2026-01-01",
                "2026-01-06",
                "2026-04-03",
                "2026-04-05",
                "2026-04-06",
                "2026-05-01",
                "2026-05-14",
                "2026-05-24",
                "2026-06-06",
                "2026-06-20",
                "2026-10-31",
                "2026-12-25",
                "2026-12-26",
            ],
        )

    def test_names(self):
        by_date = {h.date: h for h in holidays_for_year(2026)}
        self.assertEqual(by_date["2026-04-03"].name, "Good Friday")
        self.assertEqual(by_date["2026-04-03"].localized_name, "Långfredagen")
        self.assertEqual(by_date["2026-06-20"].localized_name, "Midsommardagen")
        self.assertEqual(by_date["2026-10-31"].name, "All Saints' Day")

    def test_midsummer_and_all_saints_fall_on_saturday(self):
        for year in range(2000, 2050):
            by_name = {h.name: h.date for h in holidays_for_year(year)}
            for name in ("Midsummer Day", "All Saints' Day"):
                day = datetime.date.fromisoformat(by_name[name])
                self.assertEqual(day.weekday(), 5, f"{name} {year}")

    def test_results_are_cached(self):
        first = holidays_for_year(2031)
        self.assertIn(2031, holidays_module._holiday_cache)
        self.assertIs(holidays_for_year(2031), first)


class TestHolidayLookups(unittest.TestCase):
    def test_range_spanning_years(self):
        result = holidays_for_range("2025-12-24", "2026-01-07")
        self.assertEqual(
            [h.date for h in result],
            ["2025-12-25", "2025-12-26", "2026-01-01", "2026-01-06"],
        )

    def test_range_bounds_are_inclusive(self):
        result = holidays_for_range(datetime.date(2026, 5, 14), "2026-05-24")
        self.assertEqual([h.date for h in result], ["2026-05-14", "2026-05-24"])

    def test_find_holiday(self):
        self.assertEqual(find_holiday("2026-06-06").localized_name, "Sveriges nationaldag")
        self.assertIsNone(find_holiday("2026-06-07"))

    def test_invalid_date_raises(self):
        with self.assertRaises(ValueError):
            holidays_for_range("2026-13-01", "2026-12-31")


if __name__ == "__main__":
    unittest.main()
