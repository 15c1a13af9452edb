"""Shared fixtures for the core and presentation tests."""

from __future__ import annotations

import numpy as np
import pytest

from core.game_session import GameSession
from core.targeting import find_closest_box
from core.world import Box


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)


@pytest.fixture
def session(rng) -> GameSession:
    return GameSession(box_count=100, rng=rng)


def _place_boxes(session: GameSession, positions, color: int = 0xff0000) -> list[Box]:
    """Start `session`, then swap its random layout for boxes at `positions`."""
    session.start()
    boxes = [Box(id=i, position=pos, color=color) for i, pos in enumerate(positions)]
    session.world.boxes = boxes
    session.remaining = len(boxes)
    session.target = find_closest_box(session.drone.position, boxes)
    return boxes


@pytest.fixture
def place_boxes():
    return _place_boxes
