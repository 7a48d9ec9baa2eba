"""Settings Loader for loading engine settings from YAML files."""

from pathlib import Path
from typing import Any

import yaml

from schemaflow.config.base import Settings


class SettingsLoader:
    """Loads settings from YAML files."""

    def load_file(self, path: Path | str) -> Settings:
        """Load settings from a YAML file.

        Args:
            path: Path to the YAML file

        Returns:
            Loaded Settings instance
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Settings file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return self._parse_settings(data or {})

    def load_from_string(self, content: str) -> Settings:
        data = yaml.safe_load(content)
        return self._parse_settings(data or {})

    def _parse_settings(self, data: dict[str, Any]) -> Settings:
        """Parse settings, accepting an optional top-level ``schemaflow`` section."""
        if not isinstance(data, dict):
            raise ValueError("Settings must be a YAML mapping")
        section = data.get("schemaflow", data)

        attributes = section.get("attributes", {})
        log_section = section.get("logging", {})

        values: dict[str, Any] = {}
        for key in ("schema", "order", "action"):
            if key in attributes:
                values[f"{key}_attribute"] = attributes[key]
        if "level" in log_section:
            values["log_level"] = str(log_section["level"]).upper()
        if "rich_tracebacks" in log_section:
            values["rich_tracebacks"] = log_section["rich_tracebacks"]

        return Settings(**values)

    def save_file(self, settings: Settings, path: Path | str) -> None:
        """Save settings to a YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "schemaflow": {
                "attributes": {
                    "schema": settings.schema_attribute,
                    "order": settings.order_attribute,
                    "action": settings.action_attribute,
                },
                "logging": {
                    "level": settings.log_level,
                    "rich_tracebacks": settings.rich_tracebacks,
                },
            }
        }

        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)


def load_settings(path: Path | str) -> Settings:
    """Convenience function to load settings from a file."""
    loader = SettingsLoader()
    return loader.load_file(path)
