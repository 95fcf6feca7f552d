# SPDX-License-Identifier: MIT

from typing import Optional

from rich import print
from rich.padding import Padding

from tidemark.view.state import get_show_header


def header(report_name: str, sub_header: Optional[str] = None) -> None:
    """Print the application header above a report.

    Args:
        report_name: Name of the report being shown
        sub_header: Optional line with the report's scope, e.g. its date range
    """
    if not get_show_header():
        return

    print(Padding("[dark_orange]tidemark[/dark_orange]", (1, 0, 0, 1)))
    print(Padding(f"[sandy_brown]{report_name}[/sandy_brown]", (0, 1)))
    if sub_header is not None:
        print(Padding(f"[plum1]{sub_header}[/plum1]", (0, 1)))
