"""
Game session: the state machine and the per-tick navigation/collection loop.

States:
  NOT_STARTED --start()--> RUNNING --(no target left)--> GAME_OVER --acknowledge()--> NOT_STARTED
  reset() returns to NOT_STARTED from anywhere.

`advance()` is the single-step hook. Whatever drives the session (pygame
frame loop, a plain while loop, a timer) just calls it; the session never
schedules itself.
"""

from enum import Enum
from typing import Callable, Dict, List, Optional

import numpy as np

from core.collection import CollectionDetector
from core.drone import Drone
from core.events import BoxCollected, GameOver, SessionReset, SessionStarted
from core.targeting import find_closest_box
from core.world import Box, Room, WorldState

Listener = Callable[[object], None]


class GameState(Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    GAME_OVER = "game_over"


class SessionStateError(RuntimeError):
    """Raised for a transition the state machine does not allow."""


class GameSession:
    """
    One play-through at a time: world, drone, target and the collection tally.

    Subscribers receive the dataclasses from core.events; they must not
    mutate the session from inside a callback.
    """

    def __init__(self, box_count: int = 100, room_size: float = 10.0,
                 box_size: float = 1.27, drone_size: float = 0.127,
                 drone_speed: float = 0.05, propeller_spin: float = 0.3,
                 rng: Optional[np.random.Generator] = None):
        self.box_count = box_count
        self.drone_speed = drone_speed
        self.rng = rng if rng is not None else np.random.default_rng()

        self.world = WorldState(room=Room(size=room_size), box_size=box_size)
        self.drone = Drone(size=drone_size, propeller_spin=propeller_spin)
        self.detector = CollectionDetector(box_size)

        self.state = GameState.NOT_STARTED
        self.target: Optional[Box] = None
        self.collected_boxes: List[Box] = []
        self.remaining = 0
        self.ticks = 0

        # Cleared by teardown(); nothing mutates the world once it is False
        self.alive = True

        self._listeners: List[Listener] = []

    @classmethod
    def from_config(cls, config, rng: Optional[np.random.Generator] = None) -> "GameSession":
        """Build a session from a sim_config.SimulationConfig."""
        config.validate()
        if rng is None:
            rng = np.random.default_rng(config.seed)
        return cls(box_count=config.box_count, room_size=config.room_size,
                   box_size=config.box_size, drone_size=config.drone_size,
                   drone_speed=config.drone_speed,
                   propeller_spin=config.propeller_spin, rng=rng)

    # ── Subscriptions ───────────────────────────────────────────────────

    def subscribe(self, listener: Listener):
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _publish(self, event):
        for listener in list(self._listeners):
            listener(event)

    # ── State machine ───────────────────────────────────────────────────

    @property
    def is_over(self) -> bool:
        return self.state is GameState.GAME_OVER

    @property
    def is_running(self) -> bool:
        return self.state is GameState.RUNNING and self.alive

    @property
    def collected(self) -> int:
        return len(self.collected_boxes)

    @property
    def total(self) -> int:
        return self.remaining + self.collected

    def start(self):
        """NOT_STARTED -> RUNNING with a fresh random layout."""
        self._require_alive()
        if self.state is not GameState.NOT_STARTED:
            raise SessionStateError(f"cannot start from {self.state.value}")

        self.world.spawn_boxes(self.box_count, self.rng)
        self.drone.reset()
        self.collected_boxes = []
        self.remaining = self.world.total
        self.ticks = 0
        self.state = GameState.RUNNING
        self._publish(SessionStarted(boxes=list(self.world.boxes)))

        self.target = find_closest_box(self.drone.position, self.world.boxes)
        if self.target is None:
            self._finish()

    def acknowledge(self):
        """GAME_OVER -> NOT_STARTED (the "Back to Start" action)."""
        self._require_alive()
        if self.state is not GameState.GAME_OVER:
            raise SessionStateError(f"cannot acknowledge from {self.state.value}")
        self.reset()

    def reset(self):
        """Back to NOT_STARTED from any state; the box layout is discarded."""
        self._require_alive()
        self.world.clear()
        self.drone.reset()
        self.target = None
        self.collected_boxes = []
        self.remaining = 0
        self.ticks = 0
        self.state = GameState.NOT_STARTED
        self._publish(SessionReset())

    def teardown(self):
        """The host view is going away: stop acting on the world."""
        self.alive = False
        self._listeners.clear()

    def _require_alive(self):
        if not self.alive:
            raise SessionStateError("session has been torn down")

    def _finish(self):
        self.target = None
        self.state = GameState.GAME_OVER
        self._publish(GameOver(collected=self.collected, ticks=self.ticks))

    # ── Tick ────────────────────────────────────────────────────────────

    def advance(self) -> bool:
        """Run one simulation tick. Returns True while the session keeps running."""
        if not self.is_running:
            return False

        self.ticks += 1
        target = self.target
        if target is None or target.collected:
            # Not reachable through start(); recover by re-selecting
            self._retarget()
            return self.is_running

        self.drone.step_toward(target.position, self.drone_speed)

        if self.detector.check(self.drone, target):
            self.collected_boxes.append(target)
            self.remaining -= 1
            self._publish(BoxCollected(box=target, remaining=self.remaining,
                                       collected=self.collected, tick=self.ticks))
            self._retarget()

        return self.is_running

    def _retarget(self):
        self.target = find_closest_box(self.drone.position, self.world.boxes)
        if self.target is None:
            self._finish()

    def run(self, max_ticks: Optional[int] = None) -> int:
        """Explicit-loop scheduler: advance until the session stops or `max_ticks` pass.

        Returns the number of ticks executed by this call.
        """
        executed = 0
        while self.is_running:
            if max_ticks is not None and executed >= max_ticks:
                break
            self.advance()
            executed += 1
        return executed

    # ── Reporting ───────────────────────────────────────────────────────

    def color_counts(self) -> Dict[str, int]:
        """Collected boxes per color name, in first-collected order."""
        counts: Dict[str, int] = {}
        for box in self.collected_boxes:
            counts[box.color_name] = counts.get(box.color_name, 0) + 1
        return counts

    def get_status(self) -> dict:
        """Snapshot for the status panel and console output."""
        return {
            'state': self.state.value,
            'remaining': self.remaining,
            'collected': self.collected,
            'total': self.total,
            'tick': self.ticks,
            'drone_position': self.drone.position.tolist(),
            'target_id': self.target.id if self.target is not None else None,
        }
