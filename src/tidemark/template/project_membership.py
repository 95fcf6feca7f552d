# SPDX-License-Identifier: MIT

from tidemark.model.entity_id import EntityId
from tidemark.model.entity_type import EntityType
from tidemark.model.project_membership import ProjectMembership


def get_project_membership_template(id: EntityId) -> ProjectMembership:
    return {
        "id": id,
        "entity_type": EntityType.PROJECT_MEMBERSHIP,
        "project_id": "",
        "user_id": "",
        "allocation_percentage": None,
    }
