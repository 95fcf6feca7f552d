# SPDX-License-Identifier: MIT

from decimal import Decimal

from tidemark.model.entity_id import EntityId
from tidemark.model.entity_type import EntityType
from tidemark.model.timesheet_entry import TimesheetEntry


def get_timesheet_entry_template(id: EntityId) -> TimesheetEntry:
    return {
        "id": id,
        "entity_type": EntityType.TIMESHEET_ENTRY,
        "user_id": "",
        "task_id": "",
        "project_id": "",
        "client_id": "",
        "user_name": "",
        "date": None,
        "start_time": None,
        "end_time": None,
        "hours": Decimal(0),
        "lunch_deduction": False,
        "description": "",
    }
