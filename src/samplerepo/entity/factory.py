from typing import Any, Mapping

from samplerepo.entity.model import SampleEntity


class EntityFactory:
    """Maps raw driver rows onto typed entities."""

    @staticmethod
    def create_sample_entity(record: Mapping[str, Any]) -> SampleEntity:
        return SampleEntity(id=record.get("id"), text=record.get("text"))
