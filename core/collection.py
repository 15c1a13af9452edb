"""
Arrival detection for the current target box.
"""

from typing import Optional

from core.drone import Drone
from core.world import Box


class CollectionDetector:
    """Decides when the drone has reached its target and marks the box collected."""

    def __init__(self, box_size: float):
        # Arrival once the drone center is inside half a box edge of the box center
        self.arrival_radius = box_size / 2

    def has_arrived(self, drone: Drone, target: Box) -> bool:
        return drone.distance_to(target.position) < self.arrival_radius

    def check(self, drone: Drone, target: Optional[Box]) -> bool:
        """Collect `target` if the drone has arrived. True only on a new collection."""
        if target is None or target.collected:
            return False
        if not self.has_arrived(drone, target):
            return False
        return target.mark_collected()
