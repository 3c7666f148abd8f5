#!/usr/bin/env python3
"""Print every change made to the SampleEntity table until Ctrl+C."""

import sys
import time

from rich.console import Console

from samplerepo.config import CLIConfiguration, Config
from samplerepo.db import DatabaseRepository
from samplerepo.entity import SampleEntity, SampleEntityRepository

console = Console()


def print_change(old: SampleEntity | None, new: SampleEntity | None) -> None:
    if old is None:
        console.print(f"[green]inserted[/] {new}")
    elif new is None:
        console.print(f"[red]deleted[/] {old}")
    else:
        console.print(f"[yellow]updated[/] {old} -> {new}")


def main() -> None:
    configuration = CLIConfiguration.from_command_line_arguments(sys.argv)
    config = Config.from_env()

    # Never drop the schema we are about to watch
    with DatabaseRepository(config.database_host, config.database_port) as database:
        database.connect(configuration.database_name)
        repository = SampleEntityRepository(database, configuration.database_name)

        subscription = repository.watch(print_change)
        console.print(f"Watching {configuration.database_name}.{repository.table_name}...")
        try:
            while subscription.running:
                time.sleep(0.5)
        except KeyboardInterrupt:
            console.print("[dim]Stopping.[/]")
            subscription.stop()

        result = subscription.result()
        console.print(f"Received {result.changes} change(s).")
        result.raise_for_error()


if __name__ == "__main__":
    main()
