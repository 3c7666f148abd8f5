import dataclasses
from typing import Any, Callable, Mapping, Optional

from samplerepo.db import ChangeSubscription, DatabaseRepository
from samplerepo.entity.factory import EntityFactory
from samplerepo.entity.model import SampleEntity
from samplerepo.repositories.base import Repository


class SampleEntityRepository(Repository[SampleEntity]):
    """
    Repository for SampleEntity rows.
    Stores entities in the SampleEntity table, addressing rows by id.
    """

    table_name = SampleEntity.SCHEMA.name

    def __init__(self, database: DatabaseRepository, database_name: str):
        self._database = database
        self.database_name = database_name

    def insert(self, entity: SampleEntity) -> dict:
        """Insert the entity, replacing a stored row with the same id."""
        return self._database.insert(self.database_name, self.table_name, entity)

    def get_all(self) -> list[SampleEntity]:
        """Get every stored entity. Order is whatever the server returns."""
        cursor = self._database.query(self.database_name, self.table_name, lambda table: table)
        try:
            return [EntityFactory.create_sample_entity(row) for row in cursor]
        finally:
            cursor.close()

    def update(self, entity: SampleEntity, changes: Optional[Mapping[str, Any]] = None) -> dict:
        """
        Patch the stored row with the entity's id.

        Without `changes`, every field except id is copied from `entity`.
        Rows that don't exist are not created.
        """
        if changes is None:
            patch = {k: v for k, v in dataclasses.asdict(entity).items() if k != "id"}
        else:
            if "id" in changes:
                raise ValueError("The id of a stored entity cannot be changed")
            patch = dict(changes)
        return self._database.update(self.database_name, self.table_name, {"id": entity.id}, patch)

    def delete(self, entity: SampleEntity) -> dict:
        """Delete the stored row with the entity's id."""
        return self._database.delete(self.database_name, self.table_name, {"id": entity.id})

    def watch(
        self,
        callback: Callable[[Optional[SampleEntity], Optional[SampleEntity]], Any],
    ) -> ChangeSubscription:
        """
        Subscribe to changes on the SampleEntity table.

        `callback(old, new)` gets the entity before and after each change;
        `old` is None for inserts and `new` is None for deletes.
        """

        def on_change(change: dict) -> None:
            old_val = change.get("old_val")
            new_val = change.get("new_val")
            callback(
                EntityFactory.create_sample_entity(old_val) if old_val is not None else None,
                EntityFactory.create_sample_entity(new_val) if new_val is not None else None,
            )

        return self._database.changes(self.database_name, self.table_name, on_change)
