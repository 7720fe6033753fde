"""Application settings and configuration management."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml


def _default_config_dir() -> Path:
    """Return the default configuration directory."""
    return Path.home() / ".weightcal"


def _default_store_path() -> Path:
    """Return the default record store path."""
    return _default_config_dir() / "WeightCalorie.txt"


def default_config_path() -> Path:
    """Return the default path of config.yaml."""
    return _default_config_dir() / "config.yaml"


@dataclass
class StoreConfig:
    """Local record store configuration."""

    path: Path = field(default_factory=_default_store_path)


@dataclass
class StabilityConfig:
    """How long an import waits for a snapshot to stop changing size."""

    attempts: int = 30
    interval_seconds: float = 2.0
    sample_delay_seconds: float = 0.5


@dataclass
class SyncConfig:
    """Cloud-drive synchronization configuration.

    Sync is disabled while ``folder`` is unset.
    """

    folder: Optional[Path] = None
    import_on_startup: bool = False
    stability: StabilityConfig = field(default_factory=StabilityConfig)

    @property
    def enabled(self) -> bool:
        return self.folder is not None


@dataclass
class DisplayConfig:
    """Display preferences."""

    weight_unit: str = "lbs"


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "WARNING"


@dataclass
class Settings:
    """Main application settings."""

    store: StoreConfig = field(default_factory=StoreConfig)
    sync: SyncConfig = field(default_factory=SyncConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """Load settings from YAML file or return defaults.

        Args:
            config_path: Path to config.yaml. If None, uses ~/.weightcal/config.yaml

        Returns:
            Settings instance
        """
        if config_path is None:
            config_path = default_config_path()

        if not config_path.exists():
            return cls()

        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        """Build settings from a parsed YAML mapping, keeping defaults for missing keys."""
        settings = cls()

        # Parse store config
        if "store" in data:
            store_data = data["store"] or {}
            if store_data.get("path"):
                settings.store.path = Path(store_data["path"]).expanduser()

        # Parse sync config
        if "sync" in data:
            sync_data = data["sync"] or {}
            if sync_data.get("folder"):
                settings.sync.folder = Path(sync_data["folder"]).expanduser()
            if "import_on_startup" in sync_data:
                settings.sync.import_on_startup = bool(sync_data["import_on_startup"])
            if "stability" in sync_data:
                stab_data = sync_data["stability"] or {}
                if "attempts" in stab_data:
                    settings.sync.stability.attempts = int(stab_data["attempts"])
                if "interval_seconds" in stab_data:
                    settings.sync.stability.interval_seconds = float(
                        stab_data["interval_seconds"]
                    )
                if "sample_delay_seconds" in stab_data:
                    settings.sync.stability.sample_delay_seconds = float(
                        stab_data["sample_delay_seconds"]
                    )

        # Parse display config
        if "display" in data:
            display_data = data["display"] or {}
            if "weight_unit" in display_data:
                settings.display.weight_unit = str(display_data["weight_unit"])

        # Parse logging config
        if "logging" in data:
            log_data = data["logging"] or {}
            level = str(log_data.get("level", "")).upper()
            # Unknown names keep the default so every command still starts
            if level in LOG_LEVELS:
                settings.logging.level = level

        return settings

    def to_dict(self) -> dict:
        """Return settings as a YAML-friendly mapping."""
        return {
            "store": {
                "path": str(self.store.path),
            },
            "sync": {
                "folder": str(self.sync.folder) if self.sync.folder else None,
                "import_on_startup": self.sync.import_on_startup,
                "stability": {
                    "attempts": self.sync.stability.attempts,
                    "interval_seconds": self.sync.stability.interval_seconds,
                    "sample_delay_seconds": self.sync.stability.sample_delay_seconds,
                },
            },
            "display": {
                "weight_unit": self.display.weight_unit,
            },
            "logging": {
                "level": self.logging.level,
            },
        }

    def save(self, config_path: Optional[Path] = None) -> Path:
        """Save current settings to YAML file.

        Args:
            config_path: Path to save config.yaml. If None, uses ~/.weightcal/config.yaml

        Returns:
            The path written
        """
        if config_path is None:
            config_path = default_config_path()

        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w", encoding="utf-8") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

        return config_path


# Global settings instance (lazy loaded)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, loading from disk if needed."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reload_settings() -> Settings:
    """Force reload settings from disk."""
    global _settings
    _settings = Settings.load()
    return _settings


def set_settings(settings: Optional[Settings]) -> None:
    """Replace the global settings instance.

    Useful for testing. Passing None makes the next get_settings() reload from disk.
    """
    global _settings
    _settings = settings
