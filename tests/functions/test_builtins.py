import pytest

from plotscript.exceptions import ErrorCode
from plotscript.runtime.instance import ScriptStatus, battle_finished, hero_moved, text_box_closed
from plotscript.runtime.values import FALSE, TRUE, VOID, Value, ValueType

from ..utils.engine_helpers import get_engine

i = Value.integer
f = Value.float_
s = Value.string


@pytest.mark.parametrize(
    "source, expected",
    [
        pytest.param("return abs(-4)", i(4), id="abs_int"),
        pytest.param("return abs(-2.5)", f(2.5), id="abs_float"),
        pytest.param("return min(3, 1.5, 2)", f(1.5), id="min_mixed"),
        pytest.param("return max(3, 7, 2)", i(7), id="max"),
        pytest.param('return int("42")', i(42), id="int_from_string"),
        pytest.param("return int(-3.9)", i(-3), id="int_truncates"),
        pytest.param("return float(2)", f(2.0), id="float_from_int"),
        pytest.param('return float(" 1.25 ")', f(1.25), id="float_from_string"),
        pytest.param("return str([1, true])", s("[1, true]"), id="str_array"),
        pytest.param('return string_length("hello")', i(5), id="string_length"),
        pytest.param('return substring("adventure", 2, 3)', s("ven"), id="substring"),
        pytest.param('return string_equals("Potion", "POTION")', TRUE, id="string_equals_ignores_case"),
        pytest.param('return string_equals("Potion", "Ether")', FALSE, id="string_equals_differs"),
        pytest.param('return concatenate("HP ", 10, "/", 20.5)', s("HP 10/20.5"), id="concatenate"),
        pytest.param("return concatenate()", s(""), id="concatenate_nothing"),
        pytest.param("return len([1, 2, 3])", i(3), id="len"),
        pytest.param("a = [1]\nb = append(a, 2)\nreturn [a, b]", Value.of([[1], [1, 2]]), id="append_copies"),
        pytest.param('return array(3, "x")', Value.of(["x", "x", "x"]), id="array_fill"),
        pytest.param("return array(0, 1)", Value.array([]), id="array_empty"),
        pytest.param("return random(4, 4)", i(4), id="random_degenerate_range"),
    ],
)
def test_core_builtins(source, expected):
    outcome = get_engine().execute_script(source)
    assert outcome.status is ScriptStatus.COMPLETED
    assert outcome.result == expected


def test_random_stays_within_bounds_and_keeps_its_type():
    engine = get_engine()
    ints = engine.execute_script("out = []\nn = 0\nwhile n < 50 { out = append(out, random(1, 6)); n = n + 1 }\nreturn out").result
    assert all(v.type is ValueType.INTEGER and 1 <= v.data <= 6 for v in ints.items)
    x = engine.execute_script("return random(0.0, 1)").result
    assert x.type is ValueType.FLOAT
    assert 0.0 <= x.data <= 1.0


def test_random_is_reproducible_with_a_seed():
    source = "return [random(1, 1000), random(1, 1000), random(1, 1000)]"
    assert get_engine(random_seed=7).execute_script(source).result == get_engine(random_seed=7).execute_script(source).result


@pytest.mark.parametrize(
    "source",
    [
        pytest.param("return random(5, 1)", id="random_bounds_reversed"),
        pytest.param('return int("abc")', id="int_bad_string"),
        pytest.param("return int(true)", id="int_from_bool"),
        pytest.param("return float([1])", id="float_from_array"),
        pytest.param('return substring("abc", 2, 5)', id="substring_out_of_range"),
        pytest.param("return array(-1, 0)", id="array_negative_size"),
        pytest.param('give_item(1, -2)', id="negative_item_count"),
        pytest.param('move_hero("north", 2)', id="unknown_direction"),
        pytest.param('move_hero("up", -1)', id="negative_distance"),
        pytest.param('set_volume("voice", 50)', id="unknown_channel"),
        pytest.param('set_hero_stat(9, "hp", 1)', id="hero_slot_out_of_range"),
        pytest.param('set_variable("not a name", 1)', id="bad_variable_name"),
    ],
)
def test_builtin_failures(source):
    outcome = get_engine().execute_script(source)
    assert outcome.status is ScriptStatus.FAULTED
    assert outcome.error.code == ErrorCode.BUILTIN_FAILURE


def test_min_needs_at_least_one_argument():
    outcome = get_engine().execute_script("return min()")
    assert outcome.error.code == ErrorCode.ARITY_MISMATCH


def test_state_builtins_reach_the_host():
    engine = get_engine()
    source = """
    set_hero_stat(0, "hp", 30)
    give_item(5, 3)
    take_item(5, 1)
    take_item(6, 4)
    set_item_count(7, 9)
    return [get_hero_stat(0, "hp"), check_item(5), check_item(6), check_item(7)]
    """
    assert engine.execute_script(source).result == Value.of([30, 2, 0, 9])
    assert engine.host.hero_stats == {(0, "hp"): 30}
    assert engine.host.call_names()[:5] == ["set_hero_stat", "give_item", "take_item", "take_item", "set_item_count"]


def test_movement_builtins_update_the_party():
    engine = get_engine()
    engine.execute_script('teleport_to_map(3, 10, 10)\nmove_hero("Left", 4)\nteleport_to_position(1, 1)\nset_hero_direction("up")')
    host = engine.host
    assert host.map_id == 3
    assert host.position == (1, 1)
    assert host.direction == "up"
    assert ("move_hero", ("left", 4)) in host.calls


def test_text_audio_and_menu_builtins_reach_the_host():
    engine = get_engine()
    engine.execute_script(
        """
        show_text_box(12)
        show_string("Hello")
        play_music(4)
        play_sound(2)
        set_volume("sound", 40)
        set_menu_option(1, 2, false)
        hide_string()
        stop_music()
        hide_menu()
        """
    )
    host = engine.host
    assert host.text_box == 12
    assert host.string is None
    assert host.music is None
    assert host.volumes == {"music": 100, "sound": 40}
    assert host.menu_options == {(1, 2): False}
    assert host.call_names() == [
        "show_text_box",
        "show_string",
        "play_music",
        "play_sound",
        "set_volume",
        "set_menu_option",
        "hide_string",
        "stop_music",
        "hide_menu",
    ]


def test_battle_suspends_until_the_game_reports_the_result():
    engine = get_engine()
    engine.load_script("boss", 'outcome = start_battle(8)\nset_enemy_stat(0, "hp", 1)\nchange_enemy_sprite(0, 3)\nend_battle()\nreturn outcome')
    instance_id = engine.invoke_script("boss")

    suspended = engine.step(instance_id)
    assert suspended.wake_condition == battle_finished()
    assert engine.host.in_battle

    engine.notify_wake(battle_finished(), engine.host.resolve(suspended.wake_condition))
    outcome = engine.step(instance_id)
    assert outcome.result == s("victory")
    assert engine.host.enemy_stats == {(0, "hp"): 1}
    assert engine.host.enemy_sprites == {0: 3}
    assert not engine.host.in_battle


@pytest.mark.parametrize(
    "source, condition",
    [
        pytest.param("wait_for_text_box()", text_box_closed(), id="text_box"),
        pytest.param("wait_for_hero(1)", hero_moved(1), id="hero"),
    ],
)
def test_waiting_builtins_report_their_condition(source, condition):
    outcome = get_engine().execute_script(source)
    assert outcome.status is ScriptStatus.SUSPENDED
    assert outcome.wake_condition == condition


def test_wait_of_zero_does_not_pause():
    engine = get_engine()
    engine.load_script("quick", "wait(0)\nwait(-5)\nreturn 1")
    outcome = engine.step(engine.invoke_script("quick"))
    assert outcome.status is ScriptStatus.COMPLETED
    assert outcome.result == i(1)


def test_wait_returns_void():
    outcome = get_engine().execute_script("x = wait(1)\nreturn x")
    assert outcome.status is ScriptStatus.COMPLETED
    assert outcome.result == VOID
