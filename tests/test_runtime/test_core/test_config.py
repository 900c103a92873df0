import json

import pytest

from runtime.core.config import SessionConfig
from runtime.core.logs import configure_logging


def test_defaults():
    config = SessionConfig()

    assert config.database_address == "AdventureDatabase"
    assert config.data_dir is None
    assert config.search_dirs == []
    assert config.fade_out_fallback == 0.2
    assert config.settle_delay == 0.1
    assert config.default_shop_id == "Default"
    assert config.shop_panel == "ShopCanvas"
    assert config.use_fader is False
    assert config.log_level == "INFO"


def test_negative_durations_rejected():
    with pytest.raises(ValueError):
        SessionConfig(settle_delay=-1)


def test_from_dict_rejects_unknown_keys():
    with pytest.raises(ValueError, match="fade_speed"):
        SessionConfig.from_dict({"fade_speed": 2})


def test_load_resolves_paths_against_config_file(tmp_path):
    config_file = tmp_path / "adventure.json"
    config_file.write_text(json.dumps({
        "data_dir": "data",
        "search_dirs": ["extra", "more"],
        "preload": ["CharacterDatabase"],
        "default_shop_id": "General",
    }))

    config = SessionConfig.load(config_file)

    assert config.data_dir == tmp_path / "data"
    assert config.search_dirs == [tmp_path / "extra", tmp_path / "more"]
    assert config.preload == ["CharacterDatabase"]
    assert config.default_shop_id == "General"


def test_load_rejects_non_object(tmp_path):
    config_file = tmp_path / "adventure.json"
    config_file.write_text("[1, 2]")

    with pytest.raises(ValueError):
        SessionConfig.load(config_file)


def test_to_dict_round_trips_through_from_dict():
    config = SessionConfig(data_dir="game/data", preload=["A", "B"], settle_delay=0.0)

    restored = SessionConfig.from_dict(config.to_dict())

    assert restored.to_dict() == config.to_dict()


def test_configure_logging_rejects_unknown_level():
    with pytest.raises(ValueError, match="LOUD"):
        configure_logging("LOUD")
