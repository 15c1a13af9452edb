"""Game session: state machine, tick loop, tally and events."""

from __future__ import annotations

import math

import numpy as np
import pytest

from core.events import BoxCollected, GameOver, SessionReset, SessionStarted
from core.game_session import GameSession, GameState, SessionStateError
from sim_config import SimulationConfig


class EventLog:
    def __init__(self):
        self.events = []

    def __call__(self, event):
        self.events.append(event)

    def of(self, kind):
        return [e for e in self.events if isinstance(e, kind)]


class TestStateMachine:
    def test_initial_state(self, session):
        assert session.state is GameState.NOT_STARTED
        assert not session.is_running
        assert session.advance() is False

    def test_start_spawns_fresh_world(self, session):
        session.start()
        assert session.state is GameState.RUNNING
        assert session.remaining == 100
        assert session.collected == 0
        assert session.target is not None
        np.testing.assert_array_equal(session.drone.position, [0, 0, 0])

    def test_start_twice_rejected(self, session):
        session.start()
        with pytest.raises(SessionStateError):
            session.start()

    def test_acknowledge_requires_game_over(self, session):
        with pytest.raises(SessionStateError):
            session.acknowledge()
        session.start()
        with pytest.raises(SessionStateError):
            session.acknowledge()

    def test_reset_from_running(self, session):
        session.start()
        session.run(max_ticks=50)
        session.reset()
        assert session.state is GameState.NOT_STARTED
        assert session.world.boxes == []
        assert session.target is None
        assert session.remaining == 0 and session.collected == 0

    def test_zero_boxes_is_immediately_over(self, rng):
        session = GameSession(box_count=0, rng=rng)
        log = EventLog()
        session.subscribe(log)
        session.start()
        assert session.is_over
        assert len(log.of(GameOver)) == 1


class TestTick:
    def test_initial_target_is_nearest(self, session):
        session.start()
        distances = [np.linalg.norm(b.position) for b in session.world.boxes]
        assert session.target.id == int(np.argmin(distances))

    def test_single_box_ten_meters_out(self, session, place_boxes):
        place_boxes(session, [(10.0, 0.0, 0.0)])
        speed, half_box = 0.05, 0.635
        expected = math.ceil((10 - half_box) / speed)

        log = EventLog()
        session.subscribe(log)
        for _ in range(expected - 1):
            session.advance()
        assert session.collected == 0
        session.advance()

        collected = log.of(BoxCollected)
        assert len(collected) == 1
        assert collected[0].tick == expected == 188
        assert session.is_over

    def test_degenerate_start_on_top_of_box(self, session, place_boxes):
        place_boxes(session, [(0.0, 0.0, 0.0)])
        session.advance()
        assert session.collected == 1
        assert session.is_over

    def test_retargets_from_collecting_position(self, session, place_boxes):
        place_boxes(session, [(1.0, 0, 0), (-1.5, 0, 0), (2.2, 0, 0)])
        log = EventLog()
        session.subscribe(log)
        session.run()
        assert [e.box.id for e in log.of(BoxCollected)] == [0, 2, 1]

    def test_invariant_and_single_game_over_over_full_session(self, session):
        log = EventLog()
        session.subscribe(log)
        session.start()

        seen_ids = set()
        prev = session.drone.position.copy()
        while session.advance():
            assert session.remaining + session.collected == 100
            assert np.linalg.norm(session.drone.position - prev) <= session.drone_speed + 1e-12
            prev = session.drone.position.copy()
        assert session.remaining + session.collected == 100

        for event in log.of(BoxCollected):
            assert event.box.id not in seen_ids
            seen_ids.add(event.box.id)
            assert event.remaining + event.collected == 100

        assert session.is_over
        assert session.collected == 100 and session.remaining == 0
        assert len(seen_ids) == 100
        assert len(log.of(GameOver)) == 1
        assert log.of(GameOver)[0].collected == 100

        # Further ticks do nothing once over
        ticks = session.ticks
        assert session.advance() is False
        assert session.ticks == ticks
        assert len(log.of(GameOver)) == 1

    def test_collected_box_never_targeted_again(self, session):
        session.start()
        collected = set()
        while session.advance():
            if session.target is not None:
                assert session.target.id not in collected
                assert not session.target.collected
            collected = {b.id for b in session.collected_boxes}

    def test_target_is_always_nearest_uncollected(self, session):
        # Flying straight at the target closes on it faster than on any other box
        session.start()
        while session.advance():
            distances = [np.linalg.norm(b.position - session.drone.position)
                         for b in session.world.uncollected()]
            target_distance = np.linalg.norm(session.target.position - session.drone.position)
            assert target_distance <= min(distances) + 1e-9


class TestRestart:
    def test_restart_after_game_over(self, session):
        log = EventLog()
        session.subscribe(log)
        session.start()
        first_layout = [b.position.copy() for b in session.world.boxes]
        session.run()
        assert session.is_over

        session.acknowledge()
        assert session.state is GameState.NOT_STARTED
        assert len(log.of(SessionReset)) == 1

        session.start()
        assert session.remaining == 100
        assert session.collected == 0
        assert session.color_counts() == {}
        assert all(not b.collected for b in session.world.boxes)
        assert not all(np.array_equal(a, b.position)
                       for a, b in zip(first_layout, session.world.boxes))
        assert len(log.of(SessionStarted)) == 2


class TestLiveness:
    def test_teardown_stops_ticking(self, session):
        session.start()
        session.run(max_ticks=10)
        position = session.drone.position.copy()
        session.teardown()
        assert session.advance() is False
        np.testing.assert_array_equal(session.drone.position, position)

    def test_reset_after_teardown_leaves_world_alone(self, session):
        log = EventLog()
        session.subscribe(log)
        session.start()
        session.run(max_ticks=40)
        boxes = list(session.world.boxes)
        position = session.drone.position.copy()
        ticks, remaining = session.ticks, session.remaining

        session.teardown()
        with pytest.raises(SessionStateError):
            session.reset()

        assert session.state is GameState.RUNNING
        assert session.world.boxes == boxes
        np.testing.assert_array_equal(session.drone.position, position)
        assert (session.ticks, session.remaining) == (ticks, remaining)
        assert log.of(SessionReset) == []

    def test_acknowledge_after_teardown_rejected(self, session, place_boxes):
        place_boxes(session, [(0.5, 0, 0)])
        session.run()
        assert session.is_over
        session.teardown()
        with pytest.raises(SessionStateError):
            session.acknowledge()
        assert session.state is GameState.GAME_OVER
        assert session.collected == 1

    def test_cannot_start_after_teardown(self, session):
        session.teardown()
        with pytest.raises(SessionStateError):
            session.start()


class TestReporting:
    def test_color_counts_in_first_collected_order(self, session, place_boxes):
        boxes = place_boxes(session, [(0.5, 0, 0), (1.5, 0, 0), (2.5, 0, 0)])
        for box, color in zip(boxes, (0x0000ff, 0xff0000, 0x0000ff)):
            box.color = color
        session.run()
        assert list(session.color_counts().items()) == [("Blue", 2), ("Red", 1)]

    def test_status_snapshot(self, session):
        session.start()
        status = session.get_status()
        assert status['state'] == 'running'
        assert status['remaining'] == 100
        assert status['total'] == 100
        assert status['target_id'] == session.target.id
        assert status['drone_position'] == [0.0, 0.0, 0.0]

    def test_unsubscribe(self, session):
        log = EventLog()
        session.subscribe(log)
        session.unsubscribe(log)
        session.start()
        assert log.events == []


class TestFromConfig:
    def test_seeded_layouts_repeat(self):
        config = SimulationConfig(seed=7, box_count=20)
        a = GameSession.from_config(config)
        b = GameSession.from_config(config)
        a.start()
        b.start()
        for x, y in zip(a.world.boxes, b.world.boxes):
            np.testing.assert_array_equal(x.position, y.position)
            assert x.color == y.color

    def test_config_values_flow_through(self):
        config = SimulationConfig(box_count=5, room_size=6.0, drone_speed=0.1)
        session = GameSession.from_config(config)
        session.start()
        assert session.total == 5
        assert session.drone_speed == 0.1
        assert session.world.room.size == 6.0
        assert session.drone.size == pytest.approx(config.drone_size)

    def test_invalid_config_rejected(self):
        with pytest.raises(ValueError):
            GameSession.from_config(SimulationConfig(drone_speed=0))
