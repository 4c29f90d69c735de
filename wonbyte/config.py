"""
Runtime configuration for the Wonbyte progress ledger.

Settings come from environment variables, optionally loaded from a .env
file in the project root:

- WONBYTE_DATA_DIR: directory holding the progress database (~/.wonbyte)
- WONBYTE_DB_PATH: explicit database file (overrides the data dir)
- WONBYTE_NAMESPACE: learner namespace inside a shared database ("default")
- WONBYTE_TIMEZONE: zone used to decide calendar days ("UTC")
- WONBYTE_LOG_LEVEL: logging level name ("INFO")
- WONBYTE_REWARDS_PATH: YAML reward catalog (bundled rewards.yaml)
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).parent.parent

load_dotenv(PROJECT_ROOT / ".env")

DEFAULT_DATA_DIR = Path.home() / ".wonbyte"
DEFAULT_DB_NAME = "progress.db"
DEFAULT_NAMESPACE = "default"
DEFAULT_TIMEZONE = "UTC"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_REWARDS_PATH = Path(__file__).parent / "data" / "rewards.yaml"

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class Settings:
    """Resolved settings for one process."""
    data_dir: Path
    db_path: Path
    namespace: str
    timezone: str
    log_level: str
    rewards_path: Path


def load_settings(environ: Optional[dict] = None) -> Settings:
    """
    Build settings from the environment.

    Args:
        environ: Mapping to read instead of os.environ (used by tests)

    Returns:
        Settings with every default applied
    """
    env = os.environ if environ is None else environ

    data_dir = Path(env.get("WONBYTE_DATA_DIR") or DEFAULT_DATA_DIR).expanduser()
    db_path = env.get("WONBYTE_DB_PATH")
    rewards_path = env.get("WONBYTE_REWARDS_PATH")

    return Settings(
        data_dir=data_dir,
        db_path=Path(db_path).expanduser() if db_path else data_dir / DEFAULT_DB_NAME,
        namespace=env.get("WONBYTE_NAMESPACE") or DEFAULT_NAMESPACE,
        timezone=env.get("WONBYTE_TIMEZONE") or DEFAULT_TIMEZONE,
        log_level=(env.get("WONBYTE_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper(),
        rewards_path=Path(rewards_path).expanduser() if rewards_path else DEFAULT_REWARDS_PATH,
    )


def configure_logging(level: Optional[str] = None):
    """Set up root logging with the project format."""
    logging.basicConfig(
        level=getattr(logging, (level or load_settings().log_level).upper(), logging.INFO),
        format=LOG_FORMAT,
    )
