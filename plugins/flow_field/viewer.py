"""
Interactive Pygame Viewer for the Flow Field

Particles stream through fractal noise and leave trails on the canvas.
Load a shape image to make the flow bend around it. All knobs live in
the side panel.

Controls:
  SPACE       Pause / Resume
  R           Regenerate (new noise seed)
  C           Clear canvas
  S           Save image
  L           Load shape (path given with --shape)
  X           Clear shape
  1-6         Presets
  H / TAB     Toggle control panel
  Q / ESC     Quit
"""

import os
import time
from collections import deque

import pygame

from .colors import COLOR_MODES
from .controls import ControlPanel, THEME
from .presets import PRESETS, PRESET_ORDER, SLIDER_DEFS
from .simulator import FlowSimulator


PANEL_WIDTH = 280


def screenshots_dir():
    path = os.path.join(os.getcwd(), "screenshots")
    os.makedirs(path, exist_ok=True)
    return path


class Viewer:
    def __init__(self, width=1280, height=720, start_preset="classic_smoke",
                 seed=None, shape_path=None):
        self.canvas_w = width
        self.canvas_h = height
        self.panel_visible = True
        self.running = True
        self.frame_times = deque(maxlen=30)
        self.shape_path = shape_path

        self.sim = FlowSimulator(width, height, preset_key=start_preset, seed=seed)
        if shape_path:
            self.sim.load_shape(shape_path)

        # Built after pygame.init() in run()
        self.panel = None
        self.sliders = {}
        self.preset_buttons = None
        self.mode_buttons = None
        self.status_label = None
        self.shape_label = None

    @property
    def total_w(self):
        return self.canvas_w + (PANEL_WIDTH if self.panel_visible else 0)

    # -----------------------------------------------------------------------
    # Panel
    # -----------------------------------------------------------------------

    def _build_panel(self):
        panel = ControlPanel(self.canvas_w, 0, PANEL_WIDTH, self.canvas_h)
        self.sliders = {}
        cfg = self.sim.config

        panel.add_section("PRESETS")
        names = [PRESETS[k]["name"] for k in PRESET_ORDER]
        selected = PRESET_ORDER.index(self.sim.preset_key) if self.sim.preset_key in PRESET_ORDER else None
        self.preset_buttons = panel.add_button_row(
            names, selected=selected, on_select=self._on_preset_select
        )

        section = None
        for sdef in SLIDER_DEFS:
            if sdef["section"] != section:
                section = sdef["section"]
                panel.add_section(section)
                if section == "COLOR":
                    self.mode_buttons = panel.add_button_row(
                        [m.capitalize() for m in COLOR_MODES],
                        selected=COLOR_MODES.index(cfg["color_mode"]),
                        on_select=self._on_mode_select,
                    )
            self.sliders[sdef["key"]] = panel.add_slider(
                sdef, cfg[sdef["key"]], on_change=self._on_param_change
            )

        panel.add_section("ACTIONS")
        panel.add_button("Regenerate  [R]", on_click=self._on_regenerate)
        panel.add_button("Clear canvas  [C]", on_click=self.sim.clear_canvas, danger=True)
        panel.add_button("Save image  [S]", on_click=self._save_image)
        panel.add_button("Load shape  [L]", on_click=self._on_load_shape)
        panel.add_button("Clear shape  [X]", on_click=self._on_clear_shape)

        panel.add_spacer(6)
        self.shape_label = panel.add_label(dim=True)
        self.status_label = panel.add_label()
        self._update_shape_label()

        self.panel = panel

    def _sync_sliders(self):
        cfg = self.sim.config
        for key, slider in self.sliders.items():
            slider.set_value(cfg[key])
        if self.mode_buttons:
            self.mode_buttons.select(COLOR_MODES.index(cfg["color_mode"]))

    def _update_shape_label(self):
        if self.shape_label is not None:
            name = self.sim.shape_name
            self.shape_label.text = f"Shape: {os.path.basename(name)}" if name else "Shape: none"

    def _on_param_change(self, key, value):
        self.sim.set_params(**{key: value})

    def _on_preset_select(self, idx, name):
        self.sim.apply_preset(PRESET_ORDER[idx])
        self._sync_sliders()

    def _on_mode_select(self, idx, name):
        self.sim.set_params(color_mode=COLOR_MODES[idx])

    def _on_regenerate(self):
        self.sim.regenerate()

    def _on_load_shape(self):
        if not self.shape_path:
            print("[flow] No shape path configured (start with --shape PATH)")
            return
        self.sim.load_shape(self.shape_path)
        self._update_shape_label()

    def _on_clear_shape(self):
        self.sim.clear_shape()
        self._update_shape_label()

    def _save_image(self):
        timestamp = time.strftime("%Y%m%d_%H%M%S")
        path = os.path.join(screenshots_dir(), f"flow-field-{timestamp}.png")
        self.sim.save_image(path)

    # -----------------------------------------------------------------------
    # Main loop
    # -----------------------------------------------------------------------

    def _resize(self, total_w, total_h):
        canvas_w = total_w - (PANEL_WIDTH if self.panel_visible else 0)
        if canvas_w < 64 or total_h < 64:
            return
        self.canvas_w, self.canvas_h = canvas_w, total_h
        self.sim.resize(canvas_w, total_h)
        self._update_shape_label()
        if self.panel:
            self.panel.x = self.canvas_w
            self.panel.height = self.canvas_h
            self.panel.scroll_by(0)

    def run(self):
        """Main viewer loop."""
        pygame.init()

        screen = pygame.display.set_mode((self.total_w, self.canvas_h), pygame.RESIZABLE)
        pygame.display.set_caption("Flow Field")
        clock = pygame.time.Clock()

        self.panel_font = pygame.font.SysFont("menlo", 12)

        self._build_panel()

        while self.running:
            frame_start = time.time()

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self.running = False
                    continue

                if event.type == pygame.VIDEORESIZE:
                    self._resize(event.w, event.h)
                    screen = pygame.display.set_mode((self.total_w, self.canvas_h), pygame.RESIZABLE)
                    continue

                if event.type == pygame.KEYDOWN:
                    screen = self._handle_keydown(event, screen)
                    continue

                if self.panel_visible and self.panel:
                    self.panel.handle_event(event)

            self.sim.step()

            screen.fill(THEME["bg"])
            rgb = self.sim.render()
            surface = pygame.surfarray.make_surface(rgb.swapaxes(0, 1))
            screen.blit(surface, (0, 0))

            frame_time = time.time() - frame_start
            self.frame_times.append(frame_time)
            avg_fps = len(self.frame_times) / max(sum(self.frame_times), 0.001)

            if self.panel_visible and self.panel:
                paused = "  [PAUSED]" if self.sim.config["paused"] else ""
                self.status_label.text = (
                    f"FPS {avg_fps:.0f}  |  {len(self.sim.particles):,} particles{paused}"
                )
                self.panel.draw(screen, self.panel_font)

            pygame.display.flip()
            clock.tick(60)

        pygame.quit()

    def _handle_keydown(self, event, screen):
        key = event.key

        if key in (pygame.K_q, pygame.K_ESCAPE):
            self.running = False

        elif key == pygame.K_SPACE:
            self.sim.set_params(paused=not self.sim.config["paused"])

        elif key == pygame.K_r:
            self._on_regenerate()

        elif key == pygame.K_c:
            self.sim.clear_canvas()

        elif key == pygame.K_s:
            self._save_image()

        elif key == pygame.K_l:
            self._on_load_shape()

        elif key == pygame.K_x:
            self._on_clear_shape()

        elif key in (pygame.K_h, pygame.K_TAB):
            self.panel_visible = not self.panel_visible
            screen = pygame.display.set_mode((self.total_w, self.canvas_h), pygame.RESIZABLE)

        elif pygame.K_1 <= key <= pygame.K_9:
            idx = key - pygame.K_1
            if idx < len(PRESET_ORDER):
                self.sim.apply_preset(PRESET_ORDER[idx])
                if self.preset_buttons:
                    self.preset_buttons.select(idx)
                self._sync_sliders()

        return screen
