"""Reader for the ``key = value`` settings file that seeds CLI defaults."""

import math
from pathlib import Path
from typing import Dict, Iterable

from simroute.core.logging_utils import get_module_logger


class ConfigManager:

    def __init__(self):
        self.logger = get_module_logger("ConfigManager")

    def _parse_config_lines(self, lines: Iterable[str]) -> Dict[str, str]:
        config: Dict[str, str] = {}

        for line_num, raw_line in enumerate(lines, 1):
            line = raw_line.strip()
            if not line or line.startswith('#'):
                continue
            if '=' not in line:
                self.logger.warning("Ignoring config line %d (missing '='): %s", line_num, line)
                continue

            key, value = line.split('=', 1)
            key = key.strip()
            value = value.strip()

            if '#' in value:
                value = value.split('#')[0].strip()

            if (value.startswith('"') and value.endswith('"')) or (value.startswith("'") and value.endswith("'")):
                value = value[1:-1]

            config[key] = value

        return config

    def read_config(self, config_path: Path) -> Dict[str, str]:
        """Return the settings in ``config_path``; a missing file yields ``{}``."""
        if not config_path.exists():
            self.logger.debug("No settings file at %s, using built-in defaults", config_path)
            return {}

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config = self._parse_config_lines(f)
        except OSError as e:
            self.logger.error("Failed to read config %s: %s", config_path, e)
            return {}

        self.logger.debug("Loaded %d settings from %s", len(config), config_path)
        return config

    def get_bool(self, config: Dict[str, str], key: str, default: bool = False) -> bool:
        if key not in config:
            return default

        value = config[key].lower()
        return value in ('true', '1', 'yes', 'on')

    def get_float(self, config: Dict[str, str], key: str, default: float = 0.0) -> float:
        if key not in config:
            return default

        try:
            value = float(config[key])
        except ValueError:
            self.logger.warning("Invalid float value for %s: %s, using default %s", key, config[key], default)
            return default

        if not math.isfinite(value) or value <= 0:
            self.logger.warning("Non-positive or non-finite value for %s: %s, using default %s", key, config[key], default)
            return default
        return value

    def get_str(self, config: Dict[str, str], key: str, default: str = "") -> str:
        return config.get(key, default)

    def get_path(self, config: Dict[str, str], key: str, default: Path) -> Path:
        text = config.get(key, "").strip()
        return Path(text).expanduser() if text else default

_config_manager = ConfigManager()

def get_config_manager() -> ConfigManager:
    return _config_manager
