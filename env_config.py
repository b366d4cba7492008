"""Load configuration defaults from a .env file instead of the shell environment."""

import os
from pathlib import Path

from dotenv import load_dotenv

_PROJECT_ROOT = Path(__file__).resolve().parent


def _load_dotenv() -> None:
    """Load .env from project root; existing environment variables win."""
    load_dotenv(_PROJECT_ROOT / ".env")


def get_config_path() -> Path:
    """Scenario file from QUEUE_SIM_CONFIG, else config/default.yaml."""
    _load_dotenv()
    value = os.environ.get("QUEUE_SIM_CONFIG")
    if not value:
        return _PROJECT_ROOT / "config" / "default.yaml"
    path = Path(value)
    return path if path.is_absolute() else _PROJECT_ROOT / path


def get_results_dir() -> str:
    """Output directory from QUEUE_SIM_RESULTS_DIR, else 'results'."""
    _load_dotenv()
    return os.environ.get("QUEUE_SIM_RESULTS_DIR", "results")
