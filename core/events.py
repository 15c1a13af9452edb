"""
Session Event Definitions

Typed dataclasses the game session publishes to its subscribers.
The presentation layer listens for these instead of the core touching UI state:

  SessionStarted  -> build box meshes
  BoxCollected    -> drop the box from the visible world, refresh the tally
  GameOver        -> show the game-over overlay
  SessionReset    -> clear the scene, back to the welcome screen
"""

from dataclasses import dataclass, field
from typing import List

from core.world import Box


@dataclass
class SessionStarted:
    """A fresh box layout has been spawned and the drone sits at its start."""
    boxes: List[Box] = field(default_factory=list)


@dataclass
class BoxCollected:
    """The drone reached `box`. Counts are after the collection."""
    box: Box
    remaining: int
    collected: int
    tick: int


@dataclass
class GameOver:
    """No uncollected box is left. Published once per session."""
    collected: int
    ticks: int


@dataclass
class SessionReset:
    """The session went back to NOT_STARTED and its boxes were discarded."""
