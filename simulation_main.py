#!/usr/bin/env python3
"""
Drone Box Collection - Main Simulation Entry Point

=============================================================================
MISSION:
1. 100 colored boxes (50in cubes) are scattered at random inside a 10m room
2. The drone always flies straight at the NEAREST uncollected box
3. A box is collected once the drone is within half a box edge of its center
4. The run is over when no box is left
=============================================================================

Controls:
- SPACE / ENTER: Start game (welcome screen) or go back to start (game over)
- Mouse drag: Orbit camera
- Mouse wheel: Zoom
- R: Reset to welcome screen
- P: Save screenshot
- ESC: Exit

Headless mode (--headless) runs the same session from a plain loop and
prints the result, without opening a window.
"""

import pygame
import sys
import numpy as np
from typing import Optional, Set
import time
import argparse
import cv2

from core.events import BoxCollected, GameOver, SessionReset, SessionStarted
from core.game_session import GameSession, GameState
from simulation.graphics import GraphicsEngine
from simulation.scene import SceneGraph
from sim_config import SimulationConfig

# AUTO-RUN CONFIGURATION
AUTO_START = False  # Skip the welcome screen on launch

MILESTONES = (25, 50, 75, 90)


class ConsoleReporter:
    """Prints session progress: start, collection milestones, game over."""

    def __init__(self, verbose: bool = False):
        self.verbose = verbose
        self._milestones_logged: Set[int] = set()
        self._started_at: Optional[float] = None

    def __call__(self, event):
        if isinstance(event, SessionStarted):
            self._milestones_logged = set()
            self._started_at = time.time()
            print(f"Session started: {len(event.boxes)} boxes placed")
        elif isinstance(event, BoxCollected):
            if self.verbose:
                print(f"[TICK {event.tick}] Collected box {event.box.id} ({event.box.color_name}), "
                      f"{event.remaining} remaining")
            total = event.remaining + event.collected
            pct = 100 * event.collected / total if total else 100
            for milestone in MILESTONES:
                if pct >= milestone and milestone not in self._milestones_logged:
                    self._milestones_logged.add(milestone)
                    print(f"[COLLECTED] {milestone}% at tick {event.tick} | {event.remaining} boxes left")
        elif isinstance(event, GameOver):
            elapsed = time.time() - self._started_at if self._started_at else 0.0
            print("=" * 50)
            print(f"GAME OVER! All {event.collected} boxes collected in {event.ticks} ticks "
                  f"({elapsed:.1f}s wall clock)")
            print("=" * 50)
        elif isinstance(event, SessionReset):
            print("Session reset")


class DroneSimulation:
    """Main simulation class: owns the session, the scene and the pygame loop."""

    def __init__(self, config: SimulationConfig, auto_start: bool = AUTO_START,
                 record: bool = False, verbose: bool = False):
        """Initialize the drone simulation system."""
        self.config = config
        self.window_size = config.window_size
        self.steps_per_frame = config.steps_per_frame
        self.running = True
        self.clock = pygame.time.Clock()

        # Core session; the view only learns about changes through events
        self.session = GameSession.from_config(config)
        self.scene = SceneGraph(config.room_size, config.box_size)
        self.session.subscribe(self.scene.on_event)
        self.session.subscribe(ConsoleReporter(verbose=verbose))

        self.graphics = GraphicsEngine(self.window_size, self.scene)
        self._dragging = False

        # Video recording state
        self.record = record
        self._video_writer: Optional[cv2.VideoWriter] = None
        self._video_frame_count: int = 0
        self._video_filename: str = ""
        self._games_recorded = 0

        if auto_start:
            self._start_game()
            print("AUTO-START: Game starting automatically...")

    def run(self):
        """Main simulation loop."""
        print("Starting Drone Box Collection Simulation...")
        print("Controls: SPACE=start, R=reset, P=screenshot, drag=orbit, wheel=zoom, ESC=exit")

        while self.running:
            self.clock.tick(self.config.fps)

            # Handle events
            self._handle_events()

            finished = False
            if self.session.is_running:
                for _ in range(self.steps_per_frame):
                    if not self.session.advance():
                        break
                finished = self.session.is_over

            # Render everything
            self._render()

            if finished:
                self._save_screenshot("game_over")
                self._finalize_video()

        self._cleanup()

    def _handle_events(self):
        """Handle pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif event.key in (pygame.K_SPACE, pygame.K_RETURN):
                    if self.session.state is GameState.NOT_STARTED:
                        self._start_game()
                    elif self.session.state is GameState.GAME_OVER:
                        self.session.acknowledge()
                elif event.key == pygame.K_r:
                    self._reset_simulation()
                elif event.key == pygame.K_p:
                    self._save_screenshot()
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                if self._click_button(event.pos):
                    continue
                self._dragging = self.session.state is not GameState.NOT_STARTED
            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                self._dragging = False
            elif event.type == pygame.MOUSEMOTION and self._dragging:
                self.graphics.camera.rotate(*event.rel)
            elif event.type == pygame.MOUSEWHEEL:
                self.graphics.camera.zoom(event.y)

    def _click_button(self, pos) -> bool:
        """Start Game / Back to Start buttons. Returns True if a button was hit."""
        state = self.session.state
        if state is GameState.NOT_STARTED and self.graphics.start_button is not None:
            if self.graphics.start_button.collidepoint(pos):
                self._start_game()
                return True
        if state is GameState.GAME_OVER and self.graphics.back_button is not None:
            if self.graphics.back_button.collidepoint(pos):
                self.session.acknowledge()
                return True
        return False

    def _start_game(self):
        self.graphics.camera.reset()
        self.session.start()
        if self.record:
            self._start_video_recording()

    def _render(self):
        self.graphics.clear()
        if self.session.state is GameState.NOT_STARTED:
            self.graphics.draw_start_screen()
        else:
            self.graphics.draw_world(self.session.drone)
            self.graphics.draw_ui(self.session.get_status(), self.session.color_counts(),
                                  self.session.is_over)
            self.graphics.draw_help()
        self.graphics.present()
        self._record_frame()

    def _start_video_recording(self):
        """Open an MP4 writer for the game that is starting."""
        if self._video_writer is not None:
            self._finalize_video()
        self._games_recorded += 1
        stamp = time.strftime("%Y%m%d_%H%M%S")
        self._video_filename = f"collector_game{self._games_recorded:02d}_{stamp}.mp4"
        self._video_frame_count = 0
        w, h = self.window_size
        fourcc = cv2.VideoWriter_fourcc(*'mp4v')
        self._video_writer = cv2.VideoWriter(self._video_filename, fourcc, self.config.fps, (w, h))
        if self._video_writer.isOpened():
            print(f"Recording {self._video_filename} ({w}x{h} @ {self.config.fps}fps)")
        else:
            print(f"WARNING: could not open {self._video_filename} for writing")
            self._video_writer = None

    def _record_frame(self):
        """Append the frame just presented to the open recording, if any."""
        if self._video_writer is None:
            return
        rgb = np.transpose(pygame.surfarray.array3d(self.graphics.screen), (1, 0, 2))
        self._video_writer.write(cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR))
        self._video_frame_count += 1

    def _finalize_video(self):
        """Close the recording and report what it holds."""
        if self._video_writer is None:
            return
        self._video_writer.release()
        self._video_writer = None
        status = self.session.get_status()
        print(f"Video saved: {self._video_filename} ({self._video_frame_count} frames, "
              f"{status['collected']}/{status['total']} boxes)")
        self._video_frame_count = 0
        self._video_filename = ""

    def _reset_simulation(self):
        """Back to the welcome screen, discarding the current layout."""
        self._finalize_video()
        print("Resetting simulation...")
        self.session.reset()
        self.graphics.camera.reset()

    def _cleanup(self):
        """Cleanup resources."""
        self._finalize_video()
        self.session.teardown()
        pygame.quit()
        print("Simulation ended.")

    def _save_screenshot(self, tag: str = ""):
        """Save a PNG named after the run's progress."""
        status = self.session.get_status()
        tag_str = f"_{tag}" if tag else ""
        filename = f"sim_{status['collected']}of{status['total']}_{status['tick']}ticks{tag_str}.png"
        try:
            pygame.image.save(self.graphics.screen, filename)
            print(f"Saved: {filename}")
        except pygame.error as e:
            print(f"Error saving screenshot: {e}")


def run_headless(config: SimulationConfig, max_ticks: Optional[int] = None,
                 verbose: bool = False) -> GameSession:
    """Drive one session from a plain loop, no window. Returns the finished session."""
    session = GameSession.from_config(config)
    session.subscribe(ConsoleReporter(verbose=verbose))
    session.start()
    ticks = session.run(max_ticks=max_ticks)
    if session.is_running:
        status = session.get_status()
        print(f"Stopped after {ticks} ticks: {status['collected']}/{status['total']} collected")
    counts = session.color_counts()
    if counts:
        print("Collected colors: " + ", ".join(f"{name}: {n}" for name, n in counts.items()))
    session.teardown()
    return session


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Drone box collection simulation")
    defaults = SimulationConfig()
    parser.add_argument("--boxes", type=int, default=defaults.box_count, help="number of boxes")
    parser.add_argument("--room-size", type=float, default=defaults.room_size, help="room edge in meters")
    parser.add_argument("--speed", type=float, default=defaults.drone_speed, help="drone meters per tick")
    parser.add_argument("--seed", type=int, default=None, help="random seed for the box layout")
    parser.add_argument("--steps-per-frame", type=int, default=defaults.steps_per_frame, help="ticks per rendered frame")
    parser.add_argument("--fps", type=int, default=defaults.fps, help="frame rate cap")
    parser.add_argument("--headless", action="store_true", help="run without a window")
    parser.add_argument("--max-ticks", type=int, default=None, help="headless tick limit")
    parser.add_argument("--auto-start", action="store_true", default=AUTO_START, help="skip the welcome screen")
    parser.add_argument("--record", action="store_true", help="record each game to MP4")
    parser.add_argument("--verbose", action="store_true", help="print every collection")
    return parser


def config_from_args(args) -> SimulationConfig:
    config = SimulationConfig(box_count=args.boxes, room_size=args.room_size,
                              drone_speed=args.speed, seed=args.seed,
                              steps_per_frame=args.steps_per_frame, fps=args.fps)
    config.validate()
    return config


def main(argv=None):
    """Main entry point."""
    args = build_parser().parse_args(argv)
    try:
        config = config_from_args(args)
        if args.headless:
            run_headless(config, max_ticks=args.max_ticks, verbose=args.verbose)
            return
        # Ensure pygame is initialized before creating the simulation window
        if not pygame.get_init():
            pygame.init()
        simulation = DroneSimulation(config, auto_start=args.auto_start,
                                     record=args.record, verbose=args.verbose)
        simulation.run()
    except KeyboardInterrupt:
        print("\nSimulation interrupted by user.")
    except Exception as e:
        print(f"Error: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
