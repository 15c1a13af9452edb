"""
Core: Drone Box Collection (no rendering, no pygame)

  world.py         Room bounds, Box records, random box spawning
  palette.py       Fixed color table (hex -> name, hex -> RGB)
  drone.py         Drone position + one Euler step toward a target
  targeting.py     Nearest uncollected box
  collection.py    Arrival test and collect
  events.py        Dataclasses published to the presentation layer
  game_session.py  State machine and the per-tick loop (advance())
"""

from core.world import Box, Room, WorldState, INCH_TO_METER
from core.palette import PALETTE, COLOR_NAMES, color_name, hex_to_rgb
from core.drone import Drone
from core.targeting import find_closest_box
from core.collection import CollectionDetector
from core.events import SessionStarted, BoxCollected, GameOver, SessionReset
from core.game_session import GameSession, GameState, SessionStateError

__all__ = [
    "Box", "Room", "WorldState", "INCH_TO_METER",
    "PALETTE", "COLOR_NAMES", "color_name", "hex_to_rgb",
    "Drone",
    "find_closest_box",
    "CollectionDetector",
    "SessionStarted", "BoxCollected", "GameOver", "SessionReset",
    "GameSession", "GameState", "SessionStateError",
]
