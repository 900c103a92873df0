import pytest

from adventure.dispatcher import CommandDispatcher, parse_shop_parameter
from adventure.models import AdventureCommand, CommandType
from runtime.core.errors import MalformedParameter


def test_parse_shop_parameter_with_shop_id():
    shop = parse_shop_parameter("Data/Shops/Blacksmith|shop_bk")

    assert shop.path == "Data/Shops/Blacksmith"
    assert shop.address == "Blacksmith"
    assert shop.shop_id == "shop_bk"


def test_parse_shop_parameter_default_shop_id():
    shop = parse_shop_parameter("Data/Shops/Blacksmith")

    assert shop.address == "Blacksmith"
    assert shop.shop_id == "Default"


def test_parse_shop_parameter_custom_default():
    assert parse_shop_parameter("Armorer", default_shop_id="General").shop_id == "General"


def test_parse_shop_parameter_without_directories():
    shop = parse_shop_parameter("Armorer|armor_01")

    assert shop.address == "Armorer"
    assert shop.shop_id == "armor_01"


def test_parse_shop_parameter_empty_shop_id_uses_default():
    assert parse_shop_parameter("Data/Shops/Blacksmith|").shop_id == "Default"


@pytest.mark.parametrize("parameter", ["", "|shop_bk", "Data/Shops/"])
def test_parse_shop_parameter_malformed(parameter):
    with pytest.raises(MalformedParameter):
        parse_shop_parameter(parameter)


def test_dispatch_routes_to_one_handler():
    dispatcher = CommandDispatcher()
    calls = []
    dispatcher.register(CommandType.MOVE, lambda p: calls.append(("move", p)))
    dispatcher.register(CommandType.TALK, lambda p: calls.append(("talk", p)))

    dispatcher.dispatch(AdventureCommand(type="Talk", parameter="npc_elder"))

    assert calls == [("talk", "npc_elder")]


def test_dispatch_returns_handler_result():
    dispatcher = CommandDispatcher()
    dispatcher.register(CommandType.SYSTEM, lambda p: f"ran {p}")

    assert dispatcher.dispatch(AdventureCommand(type="System", parameter="save")) == "ran save"


def test_unknown_command_type_is_ignored():
    dispatcher = CommandDispatcher()
    calls = []
    for command_type in CommandType:
        dispatcher.register(command_type, calls.append)

    result = dispatcher.dispatch(AdventureCommand(type="Fish", parameter="river"))

    assert result is None
    assert calls == []


def test_known_type_without_handler_is_ignored():
    dispatcher = CommandDispatcher()

    assert dispatcher.dispatch(AdventureCommand(type="Battle", parameter="wolf")) is None


def test_none_command_is_ignored():
    assert CommandDispatcher().dispatch(None) is None


def test_register_replaces_and_unregister_removes():
    dispatcher = CommandDispatcher()
    calls = []
    dispatcher.register(CommandType.EXPLORE, lambda p: calls.append("old"))
    dispatcher.register(CommandType.EXPLORE, lambda p: calls.append("new"))

    dispatcher.dispatch(AdventureCommand(type="Explore"))
    assert calls == ["new"]

    dispatcher.unregister(CommandType.EXPLORE)
    assert not dispatcher.handles(CommandType.EXPLORE)
    assert dispatcher.get_handler(CommandType.EXPLORE) is None
