import os
from dataclasses import dataclass
from enum import Enum

from dotenv import load_dotenv

from samplerepo.exceptions import ConfigurationError

ARG1_FLAG = "--arg1="
PRODUCTION_FLAG = "--runmode=producation"


def load_environment() -> str:
    """
    Load the .env file for the current SAMPLEREPO_ENV.

    Looks for `.env.<env>` first and falls back to the default `.env`.
    Variables already present in the process environment win.
    """
    env = os.environ.get("SAMPLEREPO_ENV", "development").lower()
    env_file = f".env.{env}"
    if os.path.exists(env_file):
        load_dotenv(env_file)
    else:
        load_dotenv()
    return env


class Env(Enum):
    DEV = "dev"
    PROD = "prod"


@dataclass(frozen=True)
class Config:
    """Connection settings shared by every component that talks to RethinkDB."""

    environment: str
    database_host: str
    database_port: int

    @classmethod
    def from_env(cls) -> "Config":
        environment = load_environment()
        raw_port = os.environ.get("DATABASE_PORT", "28015")
        try:
            port = int(raw_port)
        except ValueError:
            raise ConfigurationError(
                f"DATABASE_PORT must be an integer, got {raw_port!r}",
                details={"DATABASE_PORT": raw_port},
            )
        return cls(
            environment=environment,
            database_host=os.environ.get("DATABASE_HOST", "localhost"),
            database_port=port,
        )


@dataclass(frozen=True)
class CLIConfiguration:
    """Values taken from the command line at startup."""

    arg1: str
    env: Env

    @classmethod
    def from_command_line_arguments(cls, argv: list[str]) -> "CLIConfiguration":
        """
        Build a configuration from raw process arguments.

        The first argument starting with `--arg1=` supplies arg1; its value
        ends at the next `=`. Any argument containing `--runmode=producation`
        selects production. Everything else is ignored.

        Raises:
            ConfigurationError: if no `--arg1=` argument carries a value
        """
        flag = next((arg for arg in argv if arg.startswith(ARG1_FLAG)), None)
        arg1 = flag.split("=")[1] if flag is not None else None
        if not arg1:
            raise ConfigurationError("Fatal error: Configuration argument not provided.")

        env = Env.PROD if any(PRODUCTION_FLAG in arg for arg in argv) else Env.DEV
        return cls(arg1=arg1, env=env)

    @property
    def database_name(self) -> str:
        if self.env is Env.DEV:
            return "dev_sampleDB"
        return "sampleDB"
