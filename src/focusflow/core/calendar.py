"""Pure calendar helpers for the day strip and the day brief card."""

from calendar import monthrange
from datetime import date


def days_in_month(day: date) -> list[date]:
    """Every date of the month containing `day`."""
    _, count = monthrange(day.year, day.month)
    return [day.replace(day=d) for d in range(1, count + 1)]


def select_month(month: int, selected: date, today: date | None = None) -> tuple[list[date], date]:
    """
    Switch the day strip to `month` of the current year.

    Returns (days, selected_date):
    - the current month selects today
    - a selection already inside the month is kept
    - otherwise the first of the month is selected
    """
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be 1-12, got {month}")

    today = today or date.today()
    first = date(today.year, month, 1)
    days = days_in_month(first)

    if today.month == month:
        return days, today
    if (selected.year, selected.month) == (first.year, first.month):
        return days, selected
    return days, first


def weekday_label(day: date) -> str:
    """Abbreviated weekday, e.g. "Mon"."""
    return day.strftime("%a")


def day_label(day: date) -> str:
    """Day of month without padding, e.g. "5"."""
    return str(day.day)


def day_brief(today: date | None = None) -> tuple[str, str]:
    """(weekday, day) pair shown on the home card."""
    today = today or date.today()
    return weekday_label(today), day_label(today)
