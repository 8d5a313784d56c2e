"""
Game-side collaborators that builtins talk to.

`GameHost` is the interface a game implements; every method is a no-op or a
neutral answer by default, so a host only overrides the subsystems it has.
`RecordingHost` is a self-contained in-memory game used by the command line
runner and the tests: it keeps enough state to answer queries, records every
request in order, and logs each one.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from plotscript.exceptions import BuiltinError
from plotscript.runtime.instance import WakeCondition, WakeKind
from plotscript.runtime.values import VOID, Value

logger = logging.getLogger(__name__)


class GameHost:
    # --- Text ---
    def show_text_box(self, box_id: int):
        pass

    def hide_text_box(self):
        pass

    def show_string(self, text: str):
        pass

    def hide_string(self):
        pass

    # --- State ---
    def set_hero_stat(self, hero: int, stat: str, value: int):
        pass

    def get_hero_stat(self, hero: int, stat: str) -> int:
        return 0

    def give_item(self, item: int, count: int):
        pass

    def take_item(self, item: int, count: int):
        pass

    def item_count(self, item: int) -> int:
        return 0

    def set_item_count(self, item: int, count: int):
        pass

    # --- Movement ---
    def teleport_to_map(self, map_id: int, x: int, y: int):
        pass

    def teleport_to_position(self, x: int, y: int):
        pass

    def move_hero(self, direction: str, distance: int):
        pass

    def set_hero_direction(self, direction: str):
        pass

    # --- Battle ---
    def start_battle(self, formation: int):
        pass

    def end_battle(self):
        pass

    def set_enemy_stat(self, enemy: int, stat: str, value: int):
        pass

    def change_enemy_sprite(self, enemy: int, sprite: int):
        pass

    # --- Audio ---
    def play_music(self, track: int):
        pass

    def stop_music(self):
        pass

    def play_sound(self, sound: int):
        pass

    def set_volume(self, channel: str, volume: int):
        pass

    # --- Menu ---
    def show_menu(self, menu: int):
        pass

    def hide_menu(self):
        pass

    def set_menu_option(self, menu: int, option: int, enabled: bool):
        pass


AUDIO_CHANNELS = ("music", "sound")


class RecordingHost(GameHost):
    def __init__(self, party_size: int = 4, battle_result: Any = "victory", menu_selection: int = 0):
        self.party_size = party_size
        self.battle_result = battle_result
        self.menu_selection = menu_selection
        self.calls: List[Tuple[str, tuple]] = []
        self.hero_stats: Dict[Tuple[int, str], int] = {}
        self.inventory: Dict[int, int] = {}
        self.enemy_stats: Dict[Tuple[int, str], int] = {}
        self.enemy_sprites: Dict[int, int] = {}
        self.menu_options: Dict[Tuple[int, int], bool] = {}
        self.volumes: Dict[str, int] = {channel: 100 for channel in AUDIO_CHANNELS}
        self.map_id = 0
        self.position = (0, 0)
        self.direction = "down"
        self.text_box: Optional[int] = None
        self.string: Optional[str] = None
        self.music: Optional[int] = None
        self.menu: Optional[int] = None
        self.in_battle = False

    def _record(self, name: str, *args):
        self.calls.append((name, args))
        logger.info("%s(%s)", name, ", ".join(repr(a) for a in args))

    def call_names(self) -> List[str]:
        return [name for name, _ in self.calls]

    def _check_hero(self, hero: int):
        if not 0 <= hero < self.party_size:
            raise BuiltinError(f"no hero in party slot {hero}")

    # --- Text ---
    def show_text_box(self, box_id):
        self._record("show_text_box", box_id)
        self.text_box = box_id

    def hide_text_box(self):
        self._record("hide_text_box")
        self.text_box = None

    def show_string(self, text):
        self._record("show_string", text)
        self.string = text

    def hide_string(self):
        self._record("hide_string")
        self.string = None

    # --- State ---
    def set_hero_stat(self, hero, stat, value):
        self._check_hero(hero)
        self._record("set_hero_stat", hero, stat, value)
        self.hero_stats[(hero, stat)] = value

    def get_hero_stat(self, hero, stat):
        self._check_hero(hero)
        self._record("get_hero_stat", hero, stat)
        return self.hero_stats.get((hero, stat), 0)

    def give_item(self, item, count):
        self._record("give_item", item, count)
        self.inventory[item] = self.inventory.get(item, 0) + count

    def take_item(self, item, count):
        self._record("take_item", item, count)
        self.inventory[item] = max(0, self.inventory.get(item, 0) - count)

    def item_count(self, item):
        self._record("check_item", item)
        return self.inventory.get(item, 0)

    def set_item_count(self, item, count):
        self._record("set_item_count", item, count)
        self.inventory[item] = count

    # --- Movement ---
    def teleport_to_map(self, map_id, x, y):
        self._record("teleport_to_map", map_id, x, y)
        self.map_id = map_id
        self.position = (x, y)

    def teleport_to_position(self, x, y):
        self._record("teleport_to_position", x, y)
        self.position = (x, y)

    def move_hero(self, direction, distance):
        self._record("move_hero", direction, distance)
        dx, dy = {"up": (0, -1), "down": (0, 1), "left": (-1, 0), "right": (1, 0)}[direction]
        x, y = self.position
        self.position = (x + dx * distance, y + dy * distance)
        self.direction = direction

    def set_hero_direction(self, direction):
        self._record("set_hero_direction", direction)
        self.direction = direction

    # --- Battle ---
    def start_battle(self, formation):
        self._record("start_battle", formation)
        self.in_battle = True

    def end_battle(self):
        self._record("end_battle")
        self.in_battle = False

    def set_enemy_stat(self, enemy, stat, value):
        self._record("set_enemy_stat", enemy, stat, value)
        self.enemy_stats[(enemy, stat)] = value

    def change_enemy_sprite(self, enemy, sprite):
        self._record("change_enemy_sprite", enemy, sprite)
        self.enemy_sprites[enemy] = sprite

    # --- Audio ---
    def play_music(self, track):
        self._record("play_music", track)
        self.music = track

    def stop_music(self):
        self._record("stop_music")
        self.music = None

    def play_sound(self, sound):
        self._record("play_sound", sound)

    def set_volume(self, channel, volume):
        if channel not in AUDIO_CHANNELS:
            raise BuiltinError(f"unknown audio channel '{channel}'")
        self._record("set_volume", channel, volume)
        self.volumes[channel] = volume

    # --- Menu ---
    def show_menu(self, menu):
        self._record("show_menu", menu)
        self.menu = menu

    def hide_menu(self):
        self._record("hide_menu")
        self.menu = None

    def set_menu_option(self, menu, option, enabled):
        self._record("set_menu_option", menu, option, enabled)
        self.menu_options[(menu, option)] = enabled

    def resolve(self, condition: WakeCondition) -> Value:
        """
        Plays the player's part for a headless run: closes whatever the script
        is waiting on and returns the result to hand back to it.
        """
        if condition.kind is WakeKind.TEXT_BOX_CLOSED:
            self.text_box = None
        elif condition.kind is WakeKind.MENU_CLOSED:
            self.menu = None
            return Value.of(self.menu_selection)
        elif condition.kind is WakeKind.BATTLE_FINISHED:
            self.in_battle = False
            return Value.of(self.battle_result)
        return VOID
