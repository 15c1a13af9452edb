#!/usr/bin/env python3
"""
SIMULATION CONFIGURATION
========================

Room, boxes and drone are sized like the physical setup:
- Room: 10m cube centred on the origin
- Boxes: 50in cubes, 100 of them, never straddling a wall
- Drone: 5in cube flying a fixed 5cm per tick straight at the nearest box

A box counts as collected once the drone center is inside half a box edge
of the box center.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from core.world import INCH_TO_METER

ROOM_SIZE = 10.0                        # meters
BOX_COUNT = 100
BOX_SIZE = 50 * INCH_TO_METER           # meters, edge length
DRONE_SIZE = 5 * INCH_TO_METER          # meters, edge length
DRONE_SPEED = 0.05                      # meters per tick
PROPELLER_SPIN = 0.3                    # radians per tick

WINDOW_SIZE = (1280, 800)
FPS = 60
STEPS_PER_FRAME = 1                     # simulation ticks per rendered frame


@dataclass
class SimulationConfig:
    """Everything a session and the viewer need, defaulting to the constants above."""
    room_size: float = ROOM_SIZE
    box_count: int = BOX_COUNT
    box_size: float = BOX_SIZE
    drone_size: float = DRONE_SIZE
    drone_speed: float = DRONE_SPEED
    propeller_spin: float = PROPELLER_SPIN
    seed: Optional[int] = None
    window_size: Tuple[int, int] = WINDOW_SIZE
    fps: int = FPS
    steps_per_frame: int = STEPS_PER_FRAME

    def validate(self):
        """Raise ValueError for settings the simulation cannot run with."""
        if self.room_size <= 0:
            raise ValueError(f"room_size must be positive, got {self.room_size}")
        if self.box_size <= 0:
            raise ValueError(f"box_size must be positive, got {self.box_size}")
        if self.box_size > self.room_size:
            raise ValueError(
                f"box_size {self.box_size:.3f}m does not fit in a {self.room_size:.3f}m room"
            )
        if self.box_count < 0:
            raise ValueError(f"box_count must be >= 0, got {self.box_count}")
        if self.drone_speed <= 0:
            raise ValueError(f"drone_speed must be positive, got {self.drone_speed}")
        if self.fps <= 0:
            raise ValueError(f"fps must be positive, got {self.fps}")
        if self.steps_per_frame < 1:
            raise ValueError(f"steps_per_frame must be >= 1, got {self.steps_per_frame}")
