"""Object Loader for building DynamicObject trees from JSON/YAML documents."""

import json
from pathlib import Path
from typing import Any, Mapping

import yaml

from schemaflow.model.base import DynamicObject


class ObjectLoader:
    """Loads plain data documents into DynamicObject trees.

    Nested mappings become child objects, so parent links and tree search
    work on loaded data exactly as on objects built in code.
    """

    def __init__(self, nest_objects: bool = True):
        self.nest_objects = nest_objects

    def load_file(self, path: Path | str) -> DynamicObject:
        """Load an object from a JSON or YAML file.

        Args:
            path: Path to the document (.json, .yaml or .yml)

        Returns:
            Loaded DynamicObject
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Document not found: {path}")

        with open(path) as f:
            content = f.read()

        if path.suffix.lower() == ".json":
            return self.load_from_string(content, format="json")
        return self.load_from_string(content)

    def load_from_string(self, content: str, format: str = "yaml") -> DynamicObject:
        """Load an object from a JSON or YAML string."""
        if format == "json":
            data = json.loads(content)
        else:
            data = yaml.safe_load(content)

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError("Document must be a JSON/YAML object")

        return self.from_mapping(data)

    def from_mapping(self, data: Mapping[str, Any]) -> DynamicObject:
        """Build a DynamicObject from a mapping."""
        obj = DynamicObject()
        for name, value in data.items():
            obj.set(str(name), self._convert(value))
        return obj

    def _convert(self, value: Any) -> Any:
        if isinstance(value, dict) and self.nest_objects:
            return self.from_mapping(value)
        if isinstance(value, list):
            return [self._convert(v) for v in value]
        return value


def load_object(path: Path | str) -> DynamicObject:
    """Convenience function to load a DynamicObject from a file.

    Args:
        path: Path to the JSON/YAML document

    Returns:
        Loaded DynamicObject
    """
    loader = ObjectLoader()
    return loader.load_file(path)
