"""
Drone class - position state and per-tick motion toward a target
"""

import numpy as np
from typing import List, Tuple
import math

from core.world import INCH_TO_METER


class Drone:
    """
    Core drone class: a single 3D position moved by explicit Euler steps.
    No flight dynamics, no wall collision; the propellers are cosmetic only.
    """

    def __init__(self, position: Tuple[float, float, float] = (0, 0, 0),
                 size: float = 5 * INCH_TO_METER,
                 propeller_spin: float = 0.3):
        """Initialize drone at `position` (x, y, z)."""
        self.start_position = np.array(position, dtype=np.float64)
        self.position = self.start_position.copy()
        self.size = size

        # Four propellers on the top corners, rotated about their own axis each tick
        self.propeller_spin = propeller_spin  # rad per moving tick
        self.propeller_angles: List[float] = [0.0, 0.0, 0.0, 0.0]

    def step_toward(self, target: np.ndarray, speed: float) -> np.ndarray:
        """Advance one tick toward `target` at a fixed `speed` (meters per tick).

        Returns the displacement applied. When the drone already sits exactly on
        the target the direction is undefined and the drone stays put.
        """
        direction = np.asarray(target, dtype=np.float64) - self.position
        distance = np.linalg.norm(direction)

        if distance == 0 or not math.isfinite(distance):
            return np.zeros(3)

        displacement = direction / distance * speed
        self.position = self.position + displacement
        self._spin_propellers()
        return displacement

    def distance_to(self, point: np.ndarray) -> float:
        return float(np.linalg.norm(np.asarray(point, dtype=np.float64) - self.position))

    def propeller_offsets(self) -> List[Tuple[float, float, float]]:
        """Propeller hub positions relative to the drone center."""
        h = self.size / 2
        return [(h, h, h), (h, h, -h), (-h, h, h), (-h, h, -h)]

    def _spin_propellers(self):
        self.propeller_angles = [
            (angle + self.propeller_spin) % (2 * math.pi) for angle in self.propeller_angles
        ]

    def get_status(self) -> dict:
        """Get current drone status for monitoring."""
        return {
            'position': self.position.tolist(),
            'propeller_angle': self.propeller_angles[0],
        }

    def reset(self):
        """Reset drone to its start position."""
        self.position = self.start_position.copy()
        self.propeller_angles = [0.0, 0.0, 0.0, 0.0]
