"""Configuration management for the cEDH Card Performance Analyzer."""

import json
import logging
import os
from pathlib import Path
from typing import List, Optional
from dataclasses import dataclass, asdict, field

from .analyzer import DEFAULT_DECKLIST_HOSTS

logger = logging.getLogger(__name__)


@dataclass
class AnalysisConfig:
    """Configuration settings for card analysis."""

    # Commander-wide analysis
    min_inclusion_percentage: float = 2.0
    top_n_cards: int = 25
    default_sort_key: str = "win_rate_ignoring_draws"

    # Single-card analysis
    decklist_hosts: List[str] = field(default_factory=lambda: list(DEFAULT_DECKLIST_HOSTS))

    # Output preferences
    default_output_dir: str = "."
    verbose_output: bool = False
    export_csv: bool = False

    # File handling
    json_encoding: str = "utf-8"


class ConfigManager:
    """Manages application configuration with file persistence."""

    DEFAULT_CONFIG_DIR = Path.home() / ".cedh_card_analyzer"
    DEFAULT_CONFIG_FILE = "config.json"

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Initialize configuration manager.

        Args:
            config_dir: Custom configuration directory (defaults to ~/.cedh_card_analyzer)
        """
        self.config_dir = Path(config_dir) if config_dir else self.DEFAULT_CONFIG_DIR
        self.config_file = self.config_dir / self.DEFAULT_CONFIG_FILE
        self._config = AnalysisConfig()

        self.config_dir.mkdir(parents=True, exist_ok=True)

        self.load_config()

    def load_config(self) -> AnalysisConfig:
        """
        Load configuration from file.

        Returns:
            Loaded configuration object
        """
        if self.config_file.exists():
            try:
                with open(self.config_file, 'r', encoding='utf-8') as f:
                    config_data = json.load(f)

                if not isinstance(config_data, dict):
                    raise ValueError("configuration root must be an object")

                for key, value in config_data.items():
                    converter = FIELD_CONVERTERS.get(key)
                    if converter is None:
                        logger.warning(f"Ignoring unknown configuration option: {key}")
                        continue
                    try:
                        setattr(self._config, key, converter(value))
                    except (ValueError, TypeError):
                        logger.warning(f"Ignoring invalid value for {key}: {value!r}")

            except (json.JSONDecodeError, ValueError, OSError) as e:
                # Corrupt config: keep a backup and fall back to defaults
                logger.warning(f"Could not read {self.config_file}, restoring defaults: {e}")
                backup_file = self.config_file.with_suffix('.json.backup')
                self.config_file.replace(backup_file)
                self._config = AnalysisConfig()
                self.save_config()
        else:
            self.save_config()

        return self._config

    def save_config(self) -> None:
        """Save current configuration to file."""
        try:
            config_data = asdict(self._config)

            with open(self.config_file, 'w', encoding='utf-8') as f:
                json.dump(config_data, f, indent=2, sort_keys=True)

        except OSError as e:
            raise RuntimeError(f"Failed to save configuration: {e}")

    def get_config(self) -> AnalysisConfig:
        """Get current configuration."""
        return self._config

    def update_config(self, **kwargs) -> None:
        """
        Update configuration values.

        Args:
            **kwargs: Configuration values to update
        """
        for key, value in kwargs.items():
            if hasattr(self._config, key):
                setattr(self._config, key, value)
            else:
                raise ValueError(f"Unknown configuration option: {key}")

        self.save_config()

    def reset_to_defaults(self) -> None:
        """Reset configuration to default values."""
        self._config = AnalysisConfig()
        self.save_config()

    def get_logs_dir(self) -> Path:
        """Get logs directory path."""
        logs_dir = self.config_dir / "logs"
        logs_dir.mkdir(exist_ok=True)
        return logs_dir


def get_default_config() -> AnalysisConfig:
    """Get default configuration without file persistence."""
    return AnalysisConfig()


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    if not isinstance(value, str):
        raise TypeError(f"expected a boolean, got {type(value).__name__}")
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _parse_number(kind):
    def convert(value):
        if isinstance(value, bool):
            raise TypeError("expected a number, got a boolean")
        return kind(value)
    return convert


def _parse_text(value) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected a string, got {type(value).__name__}")
    return value


def _parse_hosts(value) -> List[str]:
    if not isinstance(value, list):
        raise TypeError("expected a list of host names")
    return [_parse_text(host) for host in value]


# Converters applied to values read from the config file
FIELD_CONVERTERS = {
    'min_inclusion_percentage': _parse_number(float),
    'top_n_cards': _parse_number(int),
    'default_sort_key': _parse_text,
    'decklist_hosts': _parse_hosts,
    'default_output_dir': _parse_text,
    'verbose_output': _parse_bool,
    'export_csv': _parse_bool,
    'json_encoding': _parse_text,
}


def apply_env_overrides(config: AnalysisConfig) -> AnalysisConfig:
    """
    Apply environment variable overrides to configuration.

    Args:
        config: Base configuration to override

    Returns:
        Configuration with environment overrides applied
    """
    env_mappings = {
        'CEDH_ANALYZER_MIN_INCLUSION': ('min_inclusion_percentage', float),
        'CEDH_ANALYZER_TOP_N': ('top_n_cards', int),
        'CEDH_ANALYZER_SORT_KEY': ('default_sort_key', str),
        'CEDH_ANALYZER_OUTPUT_DIR': ('default_output_dir', str),
        'CEDH_ANALYZER_VERBOSE': ('verbose_output', _parse_bool),
        'CEDH_ANALYZER_EXPORT_CSV': ('export_csv', _parse_bool),
    }

    for env_var, (attr_name, converter) in env_mappings.items():
        env_value = os.getenv(env_var)
        if env_value is not None:
            try:
                setattr(config, attr_name, converter(env_value))
            except (ValueError, TypeError):
                logger.warning(f"Ignoring invalid value for {env_var}: {env_value!r}")

    return config
