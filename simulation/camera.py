"""
Orbit camera and perspective projection for the 3D view.

Y is up. The camera orbits a target point on a sphere (azimuth around Y,
polar angle from +Y) and projects world points into a viewport rectangle.
Mouse drag and wheel input are damped the same way orbit controls in a
browser viewer behave: each update applies a fraction of the pending
rotation and decays the rest.
"""

import math
from typing import Optional, Tuple

import numpy as np

WORLD_UP = np.array([0.0, 1.0, 0.0])


class OrbitCamera:
    """Perspective camera orbiting `target`, with damped rotation and zoom."""

    MIN_POLAR = 0.01
    MAX_POLAR = math.pi - 0.01

    def __init__(self, viewport: Tuple[int, int, int, int],
                 position: Tuple[float, float, float] = (0.0, 5.0, 15.0),
                 target: Tuple[float, float, float] = (0.0, 0.0, 0.0),
                 fov_deg: float = 75.0, near: float = 0.1, far: float = 1000.0,
                 damping_factor: float = 0.05,
                 min_distance: float = 1.0, max_distance: float = 100.0):
        self.viewport = viewport  # (x, y, width, height) in screen pixels
        self.target = np.array(target, dtype=np.float64)
        self.fov = math.radians(fov_deg)
        self.near = near
        self.far = far
        self.damping_factor = damping_factor
        self.min_distance = min_distance
        self.max_distance = max_distance

        # Pixels of drag per full turn, matching a typical orbit control feel
        self.rotate_speed = 2 * math.pi / max(1, viewport[3])

        self._home = np.array(position, dtype=np.float64)
        self._set_from_position(self._home)
        self._pending_azimuth = 0.0
        self._pending_polar = 0.0

    def _set_from_position(self, position: np.ndarray):
        offset = position - self.target
        self.distance = float(np.linalg.norm(offset))
        self.polar = math.acos(max(-1.0, min(1.0, offset[1] / self.distance)))
        self.azimuth = math.atan2(offset[0], offset[2])

    @property
    def position(self) -> np.ndarray:
        sin_polar = math.sin(self.polar)
        return self.target + self.distance * np.array([
            sin_polar * math.sin(self.azimuth),
            math.cos(self.polar),
            sin_polar * math.cos(self.azimuth),
        ])

    # ── Input ───────────────────────────────────────────────────────────

    def rotate(self, dx_pixels: float, dy_pixels: float):
        """Queue an orbit from a mouse drag (applied gradually by update())."""
        self._pending_azimuth -= dx_pixels * self.rotate_speed
        self._pending_polar -= dy_pixels * self.rotate_speed

    def zoom(self, wheel_steps: float, step_scale: float = 0.95):
        """Dolly in (positive steps) or out (negative steps)."""
        self.distance *= step_scale ** wheel_steps
        self.distance = max(self.min_distance, min(self.max_distance, self.distance))

    def update(self):
        """Apply damped rotation. Call once per rendered frame."""
        self.azimuth += self._pending_azimuth * self.damping_factor
        self.polar += self._pending_polar * self.damping_factor
        self.polar = max(self.MIN_POLAR, min(self.MAX_POLAR, self.polar))
        self._pending_azimuth *= (1 - self.damping_factor)
        self._pending_polar *= (1 - self.damping_factor)

    def reset(self):
        self._set_from_position(self._home)
        self._pending_azimuth = 0.0
        self._pending_polar = 0.0

    # ── Projection ──────────────────────────────────────────────────────

    def basis(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """(right, up, forward) unit vectors of the camera frame."""
        forward = self.target - self.position
        forward /= np.linalg.norm(forward)
        right = np.cross(forward, WORLD_UP)
        norm = np.linalg.norm(right)
        if norm < 1e-9:
            right = np.array([1.0, 0.0, 0.0])
        else:
            right /= norm
        up = np.cross(right, forward)
        return right, up, forward

    def focal_length(self) -> float:
        """Pixels per unit at depth 1, from the vertical field of view."""
        return (self.viewport[3] / 2) / math.tan(self.fov / 2)

    def project(self, point) -> Optional[Tuple[float, float, float]]:
        """World point -> (screen_x, screen_y, depth). None if outside near/far."""
        right, up, forward = self.basis()
        rel = np.asarray(point, dtype=np.float64) - self.position
        depth = float(np.dot(rel, forward))
        if depth <= self.near or depth >= self.far:
            return None

        focal = self.focal_length()
        vx, vy, vw, vh = self.viewport
        sx = vx + vw / 2 + float(np.dot(rel, right)) * focal / depth
        sy = vy + vh / 2 - float(np.dot(rel, up)) * focal / depth
        return (sx, sy, depth)

    def depth_of(self, point) -> float:
        _, _, forward = self.basis()
        return float(np.dot(np.asarray(point, dtype=np.float64) - self.position, forward))
