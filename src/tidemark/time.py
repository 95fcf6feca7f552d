# SPDX-License-Identifier: MIT

import pendulum


def today_local() -> pendulum.Date:
    return pendulum.today("local").date()


def date_from_str(date_str: str) -> pendulum.Date:
    """Parse 'YYYY-MM-DD' or any ISO timestamp, keeping only the date part."""
    value = date_str.strip()
    if "T" in value:
        value = value.split("T")[0]
    elif " " in value:
        value = value.split(" ")[0]
    parsed = pendulum.parse(value, exact=True)
    if isinstance(parsed, pendulum.DateTime):
        return parsed.date()
    if isinstance(parsed, pendulum.Date):
        return parsed
    raise ValueError(f"not a date: {date_str!r}")


def date_to_display_str(date: pendulum.Date) -> str:
    return date.format("YYYY-MM-DD ddd")


def days_between(start: pendulum.Date, end: pendulum.Date) -> int:
    """Signed number of calendar days from start to end."""
    return end.toordinal() - start.toordinal()


def month_boundaries(month: str) -> tuple[pendulum.Date, pendulum.Date]:
    """First and last day of a 'YYYY-MM' month."""
    year, month_number = map(int, month.split("-"))
    first = pendulum.date(year, month_number, 1)
    return first, first.end_of("month")


def month_of(date: pendulum.Date) -> str:
    return date.format("YYYY-MM")


def minutes_from_clock_str(clock: str) -> int:
    """Minutes since midnight for an 'HH:mm' or 'HH:mm:ss' string."""
    parts = clock.strip().split(":")
    hours, minutes = int(parts[0]), int(parts[1])
    if not 0 <= hours <= 23 or not 0 <= minutes <= 59:
        raise ValueError(f"not a clock time: {clock!r}")
    return hours * 60 + minutes
