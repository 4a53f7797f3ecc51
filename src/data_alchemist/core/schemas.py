"""Static per-entity field requirements and entity-type detection."""

from __future__ import annotations

from data_alchemist.core.models import EntitySchema, EntityType

SCHEMAS: dict[EntityType, EntitySchema] = {
    EntityType.CLIENTS: EntitySchema(
        entity_type=EntityType.CLIENTS,
        id_field="ClientID",
        required=("ClientID", "ClientName", "PriorityLevel"),
        optional=("RequestedTaskIDs", "GroupTag", "AttributesJSON"),
    ),
    EntityType.WORKERS: EntitySchema(
        entity_type=EntityType.WORKERS,
        id_field="WorkerID",
        required=("WorkerID", "WorkerName", "Skills", "AvailableSlots"),
        optional=("MaxLoadPerPhase", "GroupTag", "QualificationLevel"),
    ),
    EntityType.TASKS: EntitySchema(
        entity_type=EntityType.TASKS,
        id_field="TaskID",
        required=("TaskID", "TaskName", "Duration", "RequiredSkills"),
        optional=("Category", "PreferredPhases", "MaxConcurrent"),
    ),
}

# Checked in order: "clients_tasks.csv" is a clients file.
_FILENAME_HINTS: tuple[tuple[str, EntityType], ...] = (
    ("client", EntityType.CLIENTS),
    ("worker", EntityType.WORKERS),
    ("task", EntityType.TASKS),
)


def schema_for(entity_type: EntityType | str) -> EntitySchema:
    return SCHEMAS[EntityType.parse(entity_type)]


def id_field_for(entity_type: EntityType | str) -> str:
    return schema_for(entity_type).id_field


def detect_entity_type(filename: str) -> EntityType | None:
    """Guess the entity type from a file name such as ``clients.csv``.

    Returns None when the name carries no hint; the caller then has to ask
    the user.
    """
    name = filename.lower()
    for hint, entity_type in _FILENAME_HINTS:
        if hint in name:
            return entity_type
    return None
