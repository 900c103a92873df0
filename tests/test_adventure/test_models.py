import pytest
from pydantic import ValidationError

from adventure.models import AdventureCommand, AdventureDatabase, AdventureScene, CommandType


def test_database_parses_camel_case_fields(database_data):
    database = AdventureDatabase.model_validate(database_data)

    forest = database.get_scene("forest")
    assert forest.scene_name == "Whispering Wood"
    assert forest.auto_trigger_story_id == "story_forest"
    assert forest.has_auto_trigger
    assert database.start_scene_id == "town"


def test_scene_accepts_field_names():
    scene = AdventureScene(scene_id="inn", scene_name="The Inn")

    assert scene.scene_id == "inn"
    assert scene.commands == ()
    assert not scene.has_auto_trigger


def test_scene_requires_id():
    with pytest.raises(ValidationError):
        AdventureScene.model_validate({"sceneName": "Nowhere"})


def test_scenes_are_immutable(database_data):
    scene = AdventureDatabase.model_validate(database_data).get_scene("town")

    with pytest.raises(ValidationError):
        scene.scene_name = "Renamed"


def test_unknown_command_type_is_kept():
    command = AdventureCommand(type="Fish", parameter="river")

    assert command.type == "Fish"
    assert command.command_type is None


def test_known_command_type():
    command = AdventureCommand(type="Shop", parameter="Data/Shops/Blacksmith")

    assert command.command_type is CommandType.SHOP


def test_commands_of(database_data):
    town = AdventureDatabase.model_validate(database_data).get_scene("town")

    moves = town.commands_of(CommandType.MOVE)

    assert [c.parameter for c in moves] == ["forest"]


def test_duplicate_scene_ids_first_wins():
    database = AdventureDatabase.model_validate({
        "scenes": [
            {"sceneId": "a", "sceneName": "First"},
            {"sceneId": "a", "sceneName": "Second"},
        ],
    })

    assert database.get_scene("a").scene_name == "First"


def test_empty_database():
    database = AdventureDatabase()

    assert database.start_scene_id is None
    assert database.get_scene("town") is None
