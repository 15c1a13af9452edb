"""
Target selection: greedy nearest-neighbour over the uncollected boxes.
"""

from typing import Iterable, Optional

import numpy as np

from core.world import Box


def find_closest_box(position, boxes: Iterable[Box]) -> Optional[Box]:
    """Return the uncollected box nearest to `position`, or None if there is none.

    Equal distances keep the first box seen, so with an id-ordered list the
    lowest id wins.
    """
    origin = np.asarray(position, dtype=np.float64)
    closest_box = None
    closest_distance = float('inf')

    for box in boxes:
        if box.collected:
            continue
        distance = np.linalg.norm(box.position - origin)
        if distance < closest_distance:
            closest_distance = distance
            closest_box = box

    return closest_box
