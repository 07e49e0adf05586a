from autoconfig.dates import SimpleDateGuesser
from autoconfig.models import CoveredDateParts


def test_full_date():
    covers = CoveredDateParts(day=True, month=True, year=True)
    layout, lang = SimpleDateGuesser().guess(["12 March 2024", "3 April 2024"], covers)
    assert layout == "%d %B %Y"
    assert lang == "en"


def test_german_month():
    covers = CoveredDateParts(day=True, month=True)
    layout, lang = SimpleDateGuesser().guess(["3. Juni", "14. Juni", "1. Juli"], covers)
    assert layout == "%d. %B"
    assert lang == "de"


def test_abbreviations():
    covers = CoveredDateParts(day=True, month=True)
    layout, lang = SimpleDateGuesser().guess(["Mar 12", "Apr 3"], covers)
    assert layout == "%b %d"
    assert lang == "en"


def test_numeric_and_time():
    covers = CoveredDateParts(day=True, month=True, year=True, time=True)
    layout, _ = SimpleDateGuesser().guess(["12.03.2024 20:30"], covers)
    assert layout == "%d.%m.%Y %H:%M"

    layout, lang = SimpleDateGuesser().guess(["20:30", "9:00"], CoveredDateParts(time=True))
    assert layout == "%H:%M"
    assert lang == "en"


def test_most_common_layout_wins():
    covers = CoveredDateParts(day=True, month=True)
    layout, _ = SimpleDateGuesser().guess(["12 March", "3 April", "May 5"], covers)
    assert layout == "%d %B"


def test_covered_parts_from_name():
    covers = CoveredDateParts.from_name("date-component-day-month-time")
    assert covers.day and covers.month and covers.time
    assert not covers.year
