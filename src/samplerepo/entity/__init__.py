"""
Entity

Domain entities stored by samplerepo, the factory that builds them from raw
rows, and the repository that persists them.
"""

from samplerepo.entity.factory import EntityFactory
from samplerepo.entity.model import EntitySchema, SampleEntity
from samplerepo.entity.repository import SampleEntityRepository

__all__ = ["EntityFactory", "EntitySchema", "SampleEntity", "SampleEntityRepository"]
