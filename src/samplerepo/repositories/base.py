from abc import ABC, abstractmethod
from typing import Any, Generic, Mapping, Optional, TypeVar

T = TypeVar("T")


class Repository(ABC, Generic[T]):
    """
    Generic repository contract over an entity type.

    Example:
        class SampleEntityRepository(Repository[SampleEntity]):
            def get_all(self) -> list[SampleEntity]:
                ...
    """

    @abstractmethod
    def insert(self, entity: T) -> Any:
        """Store the entity, replacing any row with the same primary key."""

    @abstractmethod
    def get_all(self) -> list[T]:
        """Return every stored entity, in no particular order."""

    @abstractmethod
    def update(self, entity: T, changes: Optional[Mapping[str, Any]] = None) -> Any:
        """Apply a partial update to the stored row identified by the entity."""

    @abstractmethod
    def delete(self, entity: T) -> Any:
        """Remove the stored row identified by the entity."""
