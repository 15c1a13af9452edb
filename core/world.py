"""
World state for the box collection run.
Models the cubic room and the boxes scattered inside it.
"""

from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from core.palette import PALETTE, color_name

INCH_TO_METER = 0.0254


@dataclass(frozen=True)
class Room:
    """Symmetric cube centred on the origin. Read-only once built."""
    size: float = 10.0  # meters, edge length

    @property
    def half_extent(self) -> float:
        return self.size / 2

    def spawn_limit(self, box_size: float) -> float:
        """Largest |coordinate| a box center may take without straddling a wall."""
        return self.half_extent - box_size / 2


@dataclass(eq=False)
class Box:
    """A collectible box. Position is fixed at creation; only `collected` changes."""
    id: int
    position: np.ndarray
    color: int
    collected: bool = False

    def __post_init__(self):
        self.position = np.array(self.position, dtype=np.float64)
        self.position.setflags(write=False)

    @property
    def color_name(self) -> str:
        return color_name(self.color)

    def mark_collected(self) -> bool:
        """Flip to collected. Returns False if the box was already collected."""
        if self.collected:
            return False
        self.collected = True
        return True


@dataclass
class WorldState:
    """
    Room bounds plus the box collection for one session.

    Boxes are kept in ascending id order; the target selector relies on that
    order to break distance ties toward the lowest id.
    """
    room: Room = field(default_factory=Room)
    box_size: float = 50 * INCH_TO_METER
    boxes: List[Box] = field(default_factory=list)

    def spawn_boxes(self, count: int, rng: Optional[np.random.Generator] = None) -> List[Box]:
        """Replace the box set with `count` fresh boxes at random positions and colors."""
        if count < 0:
            raise ValueError(f"box count must be >= 0, got {count}")
        limit = self.room.spawn_limit(self.box_size)
        if limit < 0:
            raise ValueError(
                f"box of size {self.box_size:.3f}m does not fit in a {self.room.size:.3f}m room"
            )
        rng = rng if rng is not None else np.random.default_rng()

        self.boxes = []
        for i in range(count):
            color = PALETTE[int(rng.integers(len(PALETTE)))]
            position = (rng.random(3) * 2 - 1) * limit
            self.boxes.append(Box(id=i, position=position, color=color))
        return self.boxes

    def clear(self):
        self.boxes = []

    def uncollected(self) -> List[Box]:
        return [box for box in self.boxes if not box.collected]

    @property
    def total(self) -> int:
        return len(self.boxes)
