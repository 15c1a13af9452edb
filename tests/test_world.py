"""World state: room bounds, box records and random spawning."""

from __future__ import annotations

import numpy as np
import pytest

from core.palette import PALETTE, COLOR_NAMES, color_name, hex_to_rgb
from core.world import Box, Room, WorldState, INCH_TO_METER


class TestRoom:
    def test_spawn_limit_insets_half_a_box(self):
        room = Room(size=10.0)
        assert room.spawn_limit(50 * INCH_TO_METER) == pytest.approx(5.0 - 0.635)


class TestBox:
    def test_position_is_read_only(self):
        box = Box(id=0, position=(1.0, 2.0, 3.0), color=0xff0000)
        with pytest.raises(ValueError):
            box.position[0] = 9.0

    def test_mark_collected_is_one_way(self):
        box = Box(id=0, position=(0, 0, 0), color=0x00ff00)
        assert box.mark_collected() is True
        assert box.mark_collected() is False
        assert box.collected is True

    def test_color_name_comes_from_palette(self):
        assert Box(id=0, position=(0, 0, 0), color=0x0080ff).color_name == "Sky Blue"
        assert Box(id=1, position=(0, 0, 0), color=0x123456).color_name == "Unknown"


class TestSpawn:
    def test_spawns_requested_count_in_id_order(self, rng):
        world = WorldState()
        boxes = world.spawn_boxes(100, rng)
        assert len(boxes) == 100
        assert [b.id for b in boxes] == list(range(100))
        assert world.total == 100

    def test_boxes_stay_inside_room(self, rng):
        world = WorldState(room=Room(size=10.0))
        limit = world.room.spawn_limit(world.box_size)
        for box in world.spawn_boxes(500, rng):
            assert np.all(np.abs(box.position) <= limit)

    def test_colors_drawn_from_palette(self, rng):
        world = WorldState()
        for box in world.spawn_boxes(200, rng):
            assert box.color in PALETTE
            assert not box.collected

    def test_respawn_replaces_layout(self, rng):
        world = WorldState()
        first = world.spawn_boxes(10, rng)
        first[0].mark_collected()
        second = world.spawn_boxes(10, rng)
        assert all(not b.collected for b in second)
        assert all(b is not a for a, b in zip(first, second))

    def test_zero_boxes_is_allowed(self, rng):
        assert WorldState().spawn_boxes(0, rng) == []

    def test_negative_count_rejected(self, rng):
        with pytest.raises(ValueError):
            WorldState().spawn_boxes(-1, rng)

    def test_box_larger_than_room_rejected(self, rng):
        world = WorldState(room=Room(size=1.0), box_size=2.0)
        with pytest.raises(ValueError):
            world.spawn_boxes(1, rng)

    def test_clear(self, rng):
        world = WorldState()
        world.spawn_boxes(5, rng)
        world.clear()
        assert world.uncollected() == []


class TestPalette:
    def test_every_palette_color_has_a_name(self):
        assert len(PALETTE) == 12
        assert set(PALETTE) == set(COLOR_NAMES)

    def test_names(self):
        assert color_name(0xff0000) == "Red"
        assert color_name(0xff8000) == "Orange"
        assert color_name(0x000000) == "Unknown"

    def test_hex_to_rgb(self):
        assert hex_to_rgb(0xff8000) == (255, 128, 0)
        assert hex_to_rgb(0x0080ff) == (0, 128, 255)
