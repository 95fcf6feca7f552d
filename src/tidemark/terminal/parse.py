# SPDX-License-Identifier: MIT

import re
from typing import Optional

import pendulum
import typer

from tidemark import time


def parse_date(date_param: Optional[str]) -> Optional[pendulum.Date]:
    if date_param is None:
        return None

    date = date_param.strip().lower()

    # Match YYYY-MM-DD format (time component, if any, is dropped)
    if re.match(r"\d{4}-\d{2}-\d{2}", date):
        try:
            return time.date_from_str(date)
        except ValueError as e:
            raise typer.BadParameter(f"Invalid date {date_param!r}: {e}")

    # Relative days, e.g. "-7" or "1"
    if re.match(r"^-?\d+$", date):
        return time.today_local().add(days=int(date))

    if date in ("today", "t"):
        return time.today_local()
    if date in ("yesterday", "y"):
        return time.today_local().subtract(days=1)

    raise typer.BadParameter(
        f"Unrecognized date {date_param!r}; use YYYY-MM-DD, today, yesterday or a day offset"
    )


def parse_month(month_param: Optional[str]) -> str:
    if month_param is None:
        return time.month_of(time.today_local())

    month = month_param.strip()
    match = re.match(r"^(\d{4})-(\d{1,2})$", month)
    if match is None or not 1 <= int(match.group(2)) <= 12:
        raise typer.BadParameter(f"Month must look like YYYY-MM, got {month_param!r}")
    return f"{match.group(1)}-{int(match.group(2)):02d}"
