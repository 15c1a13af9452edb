"""
Scene graph for the 3D view.

Holds the renderable geometry (room wireframe, floor grid, box meshes) and
keeps the visible box set in sync with the game session by listening to its
events. No pygame here; graphics.py does the drawing.
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple

import numpy as np

from core.events import BoxCollected, SessionReset, SessionStarted
from core.palette import hex_to_rgb

Segment = Tuple[np.ndarray, np.ndarray]

# Corner sign pattern and the quads built from it (indices into CUBE_CORNERS)
CUBE_CORNERS = np.array([
    [-1, -1, -1], [1, -1, -1], [1, 1, -1], [-1, 1, -1],
    [-1, -1, 1], [1, -1, 1], [1, 1, 1], [-1, 1, 1],
], dtype=np.float64)

CUBE_FACES = [
    ((0, 3, 2, 1), (0.0, 0.0, -1.0)),
    ((4, 5, 6, 7), (0.0, 0.0, 1.0)),
    ((0, 4, 7, 3), (-1.0, 0.0, 0.0)),
    ((1, 2, 6, 5), (1.0, 0.0, 0.0)),
    ((0, 1, 5, 4), (0.0, -1.0, 0.0)),
    ((3, 7, 6, 2), (0.0, 1.0, 0.0)),
]

CUBE_EDGES = [
    (0, 1), (1, 2), (2, 3), (3, 0),
    (4, 5), (5, 6), (6, 7), (7, 4),
    (0, 4), (1, 5), (2, 6), (3, 7),
]


def cube_vertices(center, size: float) -> np.ndarray:
    """8 corners of an axis-aligned cube."""
    return np.asarray(center, dtype=np.float64) + CUBE_CORNERS * (size / 2)


def cube_edges(center, size: float) -> List[Segment]:
    verts = cube_vertices(center, size)
    return [(verts[a], verts[b]) for a, b in CUBE_EDGES]


def grid_lines(size: float, divisions: int) -> List[Segment]:
    """Square grid on the y=0 plane centred on the origin."""
    half = size / 2
    lines = []
    for i in range(divisions + 1):
        k = -half + i * size / divisions
        lines.append((np.array([k, 0.0, -half]), np.array([k, 0.0, half])))
        lines.append((np.array([-half, 0.0, k]), np.array([half, 0.0, k])))
    return lines


@dataclass
class BoxMesh:
    """Renderable copy of a box: id, center, edge size and RGB color."""
    box_id: int
    center: np.ndarray
    size: float
    rgb: Tuple[int, int, int]
    color_name: str

    def vertices(self) -> np.ndarray:
        return cube_vertices(self.center, self.size)


class SceneGraph:
    """Visible world. Subscribe `on_event` to a GameSession."""

    def __init__(self, room_size: float, box_size: float, grid_size: float = 20.0,
                 grid_divisions: int = 20):
        self.room_size = room_size
        self.box_size = box_size
        self.room_edges = cube_edges((0.0, 0.0, 0.0), room_size)
        self.grid = grid_lines(grid_size, grid_divisions)
        self.boxes: Dict[int, BoxMesh] = {}

    def on_event(self, event):
        if isinstance(event, SessionStarted):
            self.clear()
            for box in event.boxes:
                self.add_box(box)
        elif isinstance(event, BoxCollected):
            self.remove_box(event.box.id)
        elif isinstance(event, SessionReset):
            self.clear()

    def add_box(self, box):
        self.boxes[box.id] = BoxMesh(box_id=box.id, center=np.array(box.position),
                                     size=self.box_size, rgb=hex_to_rgb(box.color),
                                     color_name=box.color_name)

    def remove_box(self, box_id: int):
        self.boxes.pop(box_id, None)

    def clear(self):
        self.boxes.clear()

    def visible_boxes(self) -> List[BoxMesh]:
        return list(self.boxes.values())
