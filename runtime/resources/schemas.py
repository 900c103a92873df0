"""
JSON schema registry.

Loads `*.schema.json` files and validates loaded content against them.
Schemas are keyed by name: `adventure.schema.json` registers as
`adventure`.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import jsonschema

SCHEMA_SUFFIX = ".schema.json"


class SchemaRegistry:
    """Named JSON schemas used to validate content databases."""

    def __init__(self, schema_dir: Path | str | None = None):
        self._schema_dir = Path(schema_dir) if schema_dir is not None else None
        self._schemas: dict[str, dict[str, Any]] = {}
        self.logger = logging.getLogger(__name__)

    def __contains__(self, name: str) -> bool:
        return name in self._schemas

    @property
    def names(self) -> list[str]:
        return sorted(self._schemas)

    def load_all(self) -> int:
        """Load every schema file in the schema directory. Returns the count."""
        if self._schema_dir is None:
            return 0

        if not self._schema_dir.exists():
            self.logger.warning(f"Schema directory not found: {self._schema_dir}")
            return 0

        count = 0
        for schema_file in sorted(self._schema_dir.glob(f"*{SCHEMA_SUFFIX}")):
            try:
                with open(schema_file, 'r', encoding='utf-8') as f:
                    schema = json.load(f)
                jsonschema.Draft7Validator.check_schema(schema)
            except (OSError, json.JSONDecodeError, jsonschema.SchemaError) as e:
                self.logger.error(f"Failed to load schema {schema_file}: {e}")
                continue

            self._schemas[schema_file.name[:-len(SCHEMA_SUFFIX)]] = schema
            count += 1

        self.logger.info(f"Loaded {count} schemas from {self._schema_dir}.")
        return count

    def register(self, name: str, schema: dict[str, Any]) -> None:
        jsonschema.Draft7Validator.check_schema(schema)
        self._schemas[name] = schema

    def get(self, name: str) -> dict[str, Any] | None:
        return self._schemas.get(name)

    def validate(self, name: str, instance: Any) -> bool:
        """
        Validate an instance against a named schema.

        Returns:
            False if no schema with that name is registered

        Raises:
            jsonschema.ValidationError: The instance does not match
        """
        schema = self._schemas.get(name)
        if schema is None:
            return False
        jsonschema.validate(instance=instance, schema=schema)
        return True
