from dataclasses import dataclass, field
from typing import ClassVar, Mapping


@dataclass(frozen=True)
class EntitySchema:
    """Static table metadata for an entity. Not enforced against stored rows."""

    name: str
    properties: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class SampleEntity:
    SCHEMA: ClassVar[EntitySchema] = EntitySchema(
        name="SampleEntity",
        properties={"id": "id", "text": "text"},
    )

    id: int
    text: str
