"""Configuration for deskcalc.

Settings live in <config_dir>/config.json under a "calculator" section:

    {"calculator": {"max_history_items": 50, "error_display_seconds": 3.0}}

Missing or unreadable files fall back to defaults.
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


CONFIG_DIR_ENV = "DESKCALC_HOME"
CONFIG_FILE_NAME = "config.json"


@dataclass
class CalculatorConfig:
    """Calculator configuration options."""

    max_history_items: int = 50
    max_input_length: int = 12
    error_display_seconds: float = 3.0
    history_file: str = "history.json"  # Relative to the config directory
    log_level: str = "WARNING"

    def history_path(self, config_dir: Path) -> Path:
        return Path(config_dir) / self.history_file


def resolve_config_dir(config_dir: Optional[str] = None) -> Path:
    """Pick the config directory.

    Args:
        config_dir: Explicit directory; wins over the environment.

    Returns:
        config_dir, else $DESKCALC_HOME, else ~/.deskcalc.
    """
    if config_dir:
        return Path(config_dir).expanduser()
    env_dir = os.environ.get(CONFIG_DIR_ENV)
    if env_dir:
        return Path(env_dir).expanduser()
    return Path.home() / ".deskcalc"


def load_config(config_dir: Path) -> CalculatorConfig:
    """Load calculator configuration.

    Args:
        config_dir: Directory holding config.json.

    Returns:
        CalculatorConfig with settings from config.json or defaults.
    """
    config_file = Path(config_dir) / CONFIG_FILE_NAME
    defaults = CalculatorConfig()

    if config_file.exists():
        try:
            with open(config_file) as f:
                data = json.load(f)
            section = data.get("calculator", {})
            return CalculatorConfig(
                max_history_items=int(section.get("max_history_items", defaults.max_history_items)),
                max_input_length=int(section.get("max_input_length", defaults.max_input_length)),
                error_display_seconds=float(
                    section.get("error_display_seconds", defaults.error_display_seconds)
                ),
                history_file=section.get("history_file", defaults.history_file),
                log_level=str(section.get("log_level", defaults.log_level)).upper(),
            )
        except (json.JSONDecodeError, IOError, AttributeError, TypeError, ValueError):
            pass

    return defaults
