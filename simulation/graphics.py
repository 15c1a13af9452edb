"""
Graphics Engine for Drone Simulation
Renders the room, boxes and drone in 3D plus the collection status panel
"""

import pygame
import numpy as np
import math
from typing import Dict, List, Optional, Tuple

from simulation.camera import OrbitCamera
from simulation.scene import CUBE_FACES, SceneGraph, cube_vertices


class Colors:
    """Color constants for visualization."""
    BLACK = (0, 0, 0)
    WHITE = (255, 255, 255)
    BLUE = (59, 130, 246)
    GRAY = (128, 128, 128)
    LIGHT_GRAY = (200, 200, 200)
    DARK_GRAY = (64, 64, 64)

    BACKGROUND = (240, 240, 240)
    PANEL = (243, 244, 246)
    ROOM = (170, 170, 170)
    GRID_CENTER = (68, 68, 68)
    GRID = (136, 136, 136)
    DRONE = (0, 255, 0)
    PROPELLER = (51, 51, 51)
    GAME_OVER_BG = (254, 249, 195)
    GAME_OVER_TITLE = (133, 77, 14)
    GAME_OVER_TEXT = (161, 98, 7)


# Directional light from (1, 1, 1) plus ambient, like a basic Phong setup
LIGHT_DIR = np.array([1.0, 1.0, 1.0]) / math.sqrt(3)
AMBIENT = 0.5
BOX_ALPHA = 128

PANEL_WIDTH = 300


class GraphicsEngine:
    """
    Main graphics engine for rendering the simulation.
    Draws the 3D view on the left and the status panel on the right.
    """

    def __init__(self, window_size: Tuple[int, int], scene: SceneGraph):
        """Initialize graphics engine."""
        # pygame.init() should be called in main() before creating GraphicsEngine

        self.window_size = window_size
        try:
            self.screen = pygame.display.set_mode(window_size)
            pygame.display.set_caption("Drone Simulation")
            print(f"Graphics engine initialized: {window_size[0]}x{window_size[1]}")
        except pygame.error as e:
            print(f"Failed to create display: {e}")
            raise

        # Fonts
        self.font_small = pygame.font.Font(None, 20)
        self.font_medium = pygame.font.Font(None, 26)
        self.font_large = pygame.font.Font(None, 34)
        self.font_title = pygame.font.Font(None, 44)

        self.scene = scene
        view_rect = (0, 0, window_size[0] - PANEL_WIDTH, window_size[1] - 50)
        self.camera = OrbitCamera(view_rect)

        # Clickable button rects, refreshed each time their screen is drawn
        self.start_button: Optional[pygame.Rect] = None
        self.back_button: Optional[pygame.Rect] = None

        self.frame_count = 0
        self._overlay = pygame.Surface(window_size, pygame.SRCALPHA)

    def clear(self):
        """Clear the screen."""
        self.screen.fill(Colors.BACKGROUND)
        self.frame_count += 1

    def present(self):
        """Present the rendered frame."""
        pygame.display.flip()

    # ── 3D view ─────────────────────────────────────────────────────────

    def draw_world(self, drone):
        """Grid, room wireframe, boxes and drone, back to front."""
        self.camera.update()
        self.draw_grid()
        self.draw_room()
        self.draw_boxes()
        self.draw_drone(drone)

    def draw_grid(self):
        for start, end in self.scene.grid:
            # The two lines through the origin are drawn darker
            through_origin = (np.allclose([start[0], end[0]], 0.0) or
                              np.allclose([start[2], end[2]], 0.0))
            color = Colors.GRID_CENTER if through_origin else Colors.GRID
            self._draw_segment(start, end, color, 1)

    def draw_room(self):
        for start, end in self.scene.room_edges:
            self._draw_segment(start, end, Colors.ROOM, 1)

    def draw_boxes(self):
        """Translucent shaded cubes, painter-sorted on the overlay surface."""
        meshes = self.scene.visible_boxes()
        if not meshes:
            return

        camera_pos = self.camera.position
        meshes.sort(key=lambda m: self.camera.depth_of(m.center), reverse=True)

        self._overlay.fill((0, 0, 0, 0))
        for mesh in meshes:
            verts = mesh.vertices()
            for indices, normal in self._visible_faces(mesh.center, mesh.size, camera_pos):
                points = self._project_polygon(verts, indices)
                if points is None:
                    continue
                color = self._shade(mesh.rgb, normal)
                pygame.draw.polygon(self._overlay, (*color, BOX_ALPHA), points)
                pygame.draw.polygon(self._overlay, (*self._blend_colors(color, Colors.BLACK, 0.3), 200),
                                    points, 1)
        self.screen.blit(self._overlay, (0, 0))

    def draw_drone(self, drone):
        """Green cube with four spinning propellers on top."""
        if drone.position is None or not np.all(np.isfinite(drone.position)):
            return

        center = drone.position
        verts = cube_vertices(center, drone.size)
        faces = self._visible_faces(center, drone.size, self.camera.position)
        faces.sort(key=lambda f: self.camera.depth_of(center + np.array(f[1]) * drone.size / 2),
                   reverse=True)
        for indices, normal in faces:
            points = self._project_polygon(verts, indices)
            if points is not None:
                pygame.draw.polygon(self.screen, self._shade(Colors.DRONE, normal), points)

        blade = drone.size / 4
        for offset, angle in zip(drone.propeller_offsets(), drone.propeller_angles):
            hub = center + np.array(offset)
            tip = np.array([math.cos(angle), 0.0, math.sin(angle)]) * blade
            self._draw_segment(hub - tip, hub + tip, Colors.PROPELLER, 2)

    def _visible_faces(self, center, size: float, camera_pos) -> List:
        """Faces whose outward normal points toward the camera."""
        faces = []
        for indices, normal in CUBE_FACES:
            face_center = np.asarray(center) + np.array(normal) * size / 2
            if np.dot(camera_pos - face_center, normal) > 0:
                faces.append((indices, normal))
        return faces

    def _project_polygon(self, verts: np.ndarray, indices) -> Optional[List[Tuple[int, int]]]:
        points = []
        for idx in indices:
            projected = self.camera.project(verts[idx])
            if projected is None:
                return None
            points.append((int(projected[0]), int(projected[1])))
        return points

    def _draw_segment(self, start, end, color, width: int):
        a = self.camera.project(start)
        b = self.camera.project(end)
        if a is None or b is None:
            return
        pygame.draw.line(self.screen, color, (int(a[0]), int(a[1])), (int(b[0]), int(b[1])), width)

    def _shade(self, rgb: Tuple[int, int, int], normal) -> Tuple[int, int, int]:
        diffuse = max(0.0, float(np.dot(LIGHT_DIR, normal)))
        intensity = min(1.0, AMBIENT + diffuse)
        return tuple(int(c * intensity) for c in rgb)

    def _blend_colors(self, color1: Tuple[int, int, int], color2: Tuple[int, int, int],
                      factor: float) -> Tuple[int, int, int]:
        """Blend two colors with given factor (0=color1, 1=color2)."""
        factor = max(0, min(1, factor))
        r = int(color1[0] * (1 - factor) + color2[0] * factor)
        g = int(color1[1] * (1 - factor) + color2[1] * factor)
        b = int(color1[2] * (1 - factor) + color2[2] * factor)
        return (r, g, b)

    # ── Panels and screens ──────────────────────────────────────────────

    def draw_ui(self, status: dict, color_counts: Dict[str, int], game_over: bool):
        """Collection status panel, with the game-over box when the run is finished."""
        ui_rect = pygame.Rect(self.window_size[0] - PANEL_WIDTH, 0, PANEL_WIDTH, self.window_size[1])
        pygame.draw.rect(self.screen, Colors.PANEL, ui_rect)
        pygame.draw.rect(self.screen, Colors.LIGHT_GRAY, ui_rect, 2)

        x = ui_rect.x + 16
        y_offset = 20
        line_height = 26

        title = self.font_large.render("Collection Status", True, Colors.BLACK)
        self.screen.blit(title, (x, y_offset))
        y_offset += 44

        for text in (f"Boxes Remaining: {status['remaining']}",
                     f"Boxes Collected: {status['collected']}"):
            self.screen.blit(self.font_medium.render(text, True, Colors.BLACK), (x, y_offset))
            y_offset += line_height + 6

        y_offset += 8
        self.screen.blit(self.font_medium.render("Collected Colors:", True, Colors.BLACK), (x, y_offset))
        y_offset += line_height + 4

        for name, count in color_counts.items():
            self.screen.blit(self.font_small.render(f"{name}:", True, Colors.DARK_GRAY), (x, y_offset))
            count_surface = self.font_small.render(str(count), True, Colors.DARK_GRAY)
            self.screen.blit(count_surface, (ui_rect.right - 16 - count_surface.get_width(), y_offset))
            y_offset += 20

        if game_over:
            self.back_button = self._draw_game_over(ui_rect, y_offset + 30)
        else:
            self.back_button = None

    def _draw_game_over(self, ui_rect: pygame.Rect, top: int) -> pygame.Rect:
        box = pygame.Rect(ui_rect.x + 16, top, ui_rect.width - 32, 150)
        pygame.draw.rect(self.screen, Colors.GAME_OVER_BG, box, border_radius=8)

        title = self.font_large.render("GAME OVER", True, Colors.GAME_OVER_TITLE)
        self.screen.blit(title, (box.centerx - title.get_width() // 2, box.y + 16))
        text = self.font_small.render("All boxes collected!", True, Colors.GAME_OVER_TEXT)
        self.screen.blit(text, (box.centerx - text.get_width() // 2, box.y + 54))

        return self._draw_button("Back to Start", (box.centerx, box.y + 110))

    def draw_start_screen(self):
        """Welcome screen with the Start Game button."""
        cx = self.window_size[0] // 2
        cy = self.window_size[1] // 2
        title = self.font_title.render("Welcome to Drone Simulation", True, Colors.BLACK)
        self.screen.blit(title, (cx - title.get_width() // 2, cy - 80))
        self.start_button = self._draw_button("Start Game", (cx, cy))
        hint = self.font_small.render("SPACE / ENTER: start    ESC: exit", True, Colors.GRAY)
        self.screen.blit(hint, (cx - hint.get_width() // 2, cy + 50))

    def draw_help(self):
        lines = [
            "The drone will automatically navigate to and collect all boxes.",
            "Drag with the mouse to rotate the camera view and scroll to zoom.  R: reset  P: screenshot",
        ]
        y = self.window_size[1] - 44
        for line in lines:
            surface = self.font_small.render(line, True, Colors.GRAY)
            self.screen.blit(surface, (16, y))
            y += 20

    def _draw_button(self, label: str, center: Tuple[int, int]) -> pygame.Rect:
        text = self.font_medium.render(label, True, Colors.WHITE)
        rect = pygame.Rect(0, 0, text.get_width() + 32, text.get_height() + 16)
        rect.center = center
        pygame.draw.rect(self.screen, Colors.BLUE, rect, border_radius=6)
        self.screen.blit(text, (rect.centerx - text.get_width() // 2, rect.centery - text.get_height() // 2))
        return rect
