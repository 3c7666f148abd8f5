#!/usr/bin/env python3
"""samplerepo CLI: scripted CRUD walkthrough against RethinkDB."""

import sys

from rich.console import Console
from rich.markup import escape

from samplerepo.config import CLIConfiguration, Config
from samplerepo.db import DatabaseRepository
from samplerepo.entity import SampleEntity, SampleEntityRepository
from samplerepo.exceptions import ConfigurationError

console = Console()


def show_entities(label: str, repository: SampleEntityRepository) -> list[SampleEntity]:
    """Print a snapshot of every stored entity."""
    entities = repository.get_all()
    console.print(f"[bold]{label}:[/]")
    console.print(entities)
    return entities


def run_demo(repository: SampleEntityRepository) -> None:
    """Insert, update and delete a sample entity, printing the table after each step."""
    first_entry = SampleEntity(1, "jeden")

    repository.insert(first_entry)
    show_entities("All sample entities after insertion", repository)

    repository.update(SampleEntity(first_entry.id, "Jeden after updated"))
    show_entities("All sample entities after update", repository)

    repository.delete(first_entry)
    show_entities("All sample entities after deletion", repository)


def main(argv: list[str] | None = None) -> None:
    argv = sys.argv if argv is None else argv

    try:
        configuration = CLIConfiguration.from_command_line_arguments(argv)
        config = Config.from_env()
    except ConfigurationError as e:
        console.print(f"[red]{escape(e.message)}[/]")
        sys.exit(1)

    console.print(
        f"Application started with configuration: {escape(configuration.arg1)}, "
        f"environment: {configuration.env.name}"
    )
    console.print(
        f"[dim]Database {configuration.database_name} on "
        f"{config.database_host}:{config.database_port}, recreated on connect[/]"
    )

    # The walkthrough always starts from an empty table
    with DatabaseRepository(config.database_host, config.database_port, force_drop=True) as database:
        database.connect(configuration.database_name)
        repository = SampleEntityRepository(database, configuration.database_name)
        run_demo(repository)


if __name__ == "__main__":
    main()
