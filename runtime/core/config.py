"""
Session configuration.

Plain keyword-argument configuration, loadable from a JSON file:

    config = SessionConfig.load("adventure.json")
    session = AdventureSession.from_config(config)
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable


class SessionConfig:
    """Configuration for an adventure session."""

    def __init__(
        self,
        database_address: str = "AdventureDatabase",
        data_dir: str | Path | None = None,
        search_dirs: Iterable[str | Path] = (),
        schema_dir: str | Path | None = None,
        preload: Iterable[str] = (),
        fade_out_fallback: float = 0.2,
        fade_in_fallback: float = 0.0,
        settle_delay: float = 0.1,
        fade_duration: float = 0.3,
        use_fader: bool = False,
        default_shop_id: str = "Default",
        shop_panel: str = "ShopCanvas",
        log_level: str = "INFO",
    ):
        self.database_address = database_address
        self.data_dir = Path(data_dir) if data_dir is not None else None
        self.search_dirs = [Path(d) for d in search_dirs]
        self.schema_dir = Path(schema_dir) if schema_dir is not None else None
        self.preload = list(preload)
        self.fade_out_fallback = fade_out_fallback
        self.fade_in_fallback = fade_in_fallback
        self.settle_delay = settle_delay
        self.fade_duration = fade_duration
        self.use_fader = use_fader
        self.default_shop_id = default_shop_id
        self.shop_panel = shop_panel
        self.log_level = log_level

        for name in ("fade_out_fallback", "fade_in_fallback", "settle_delay", "fade_duration"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0")

    @classmethod
    def from_dict(cls, data: dict[str, Any], base_dir: str | Path | None = None) -> SessionConfig:
        """
        Build a config from a mapping.

        Relative paths are resolved against base_dir when given.
        """
        unknown = set(data) - _FIELDS
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(sorted(unknown))}")

        values = dict(data)
        if base_dir is not None:
            base = Path(base_dir)
            for key in ("data_dir", "schema_dir"):
                if values.get(key) is not None:
                    values[key] = base / values[key]
            if "search_dirs" in values:
                values["search_dirs"] = [base / d for d in values["search_dirs"]]

        return cls(**values)

    @classmethod
    def load(cls, path: str | Path) -> SessionConfig:
        """Load a config from a JSON file."""
        path = Path(path)
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain an object: {path}")
        return cls.from_dict(data, base_dir=path.parent)

    def to_dict(self) -> dict[str, Any]:
        return {
            "database_address": self.database_address,
            "data_dir": str(self.data_dir) if self.data_dir else None,
            "search_dirs": [str(d) for d in self.search_dirs],
            "schema_dir": str(self.schema_dir) if self.schema_dir else None,
            "preload": list(self.preload),
            "fade_out_fallback": self.fade_out_fallback,
            "fade_in_fallback": self.fade_in_fallback,
            "settle_delay": self.settle_delay,
            "fade_duration": self.fade_duration,
            "use_fader": self.use_fader,
            "default_shop_id": self.default_shop_id,
            "shop_panel": self.shop_panel,
            "log_level": self.log_level,
        }


_FIELDS = {
    "database_address",
    "data_dir",
    "search_dirs",
    "schema_dir",
    "preload",
    "fade_out_fallback",
    "fade_in_fallback",
    "settle_delay",
    "fade_duration",
    "use_fader",
    "default_shop_id",
    "shop_panel",
    "log_level",
}
