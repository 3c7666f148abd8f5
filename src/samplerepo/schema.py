from samplerepo.entity.model import SampleEntity


class Schema:
    """
    Schema migration for one database.

    Ensures the database and every entity table exist. There is no versioning;
    "up to date" means "present".
    """

    TABLES = (SampleEntity.SCHEMA.name,)

    def __init__(self, database_name: str, database_repository):
        self.database_name = database_name
        self._database = database_repository

    def update_schema_if_needed(self, drop_all_first: bool = False) -> None:
        """
        Create the database and its tables if they are missing.

        Args:
            drop_all_first: Drop the tables, then the database, before creating
                them again. Anything stored is lost.
        """
        if drop_all_first:
            for table_name in self.TABLES:
                self._database.drop_table_if_exists(self.database_name, table_name)
            self._database.drop_database_if_exists(self.database_name)

        self._database.create_database_if_not_exists(self.database_name)
        for table_name in self.TABLES:
            self._database.create_table_if_not_exists(self.database_name, table_name)
