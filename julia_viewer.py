#!/usr/bin/env python3
"""Interactive Julia set viewer using Pygame, with a PyCUDA or numpy backend.

Rendering is request-driven: a frame is only computed after an interaction
changes the view (click to recenter, wheel to zoom, panel or keyboard edits of
c, iteration cap, scale and color mode). Between changes the last frame is reused.
"""

import argparse
import logging

import pygame

from julia import (
    PRESET_NAMES,
    ColorMode,
    ConfigurationError,
    RedrawCoordinator,
    create_renderer,
    pixel_to_complex,
)

logger = logging.getLogger("julia_viewer")

C_STEP = 0.01
ITER_STEP = 10
SCALE_STEP = 25

# ── UI constants ──────────────────────────────────────────────
PANEL_W = 210
PANEL_PAD = 10
BTN_H = 28
BTN_GAP = 6
SECTION_GAP = 14

COL_BG = (18, 18, 28, 210)
COL_BTN = (55, 55, 75)
COL_BTN_HOVER = (80, 80, 110)
COL_TEXT = (220, 220, 230)
COL_HEADING = (140, 160, 200)
COL_ACCENT = (100, 180, 255)


class JuliaViewer:
    """Pygame window around a RedrawCoordinator."""

    def __init__(self, coordinator, width=1280, height=720):
        self.coordinator = coordinator
        self.width = width
        self.height = height
        self.current_preset = 0

        self.running = True
        self.panel_visible = True
        self.buttons = []
        self.sections = []
        self.frame = None
        self.surface = None

        self._init_pygame()
        self._build_buttons()

    def _init_pygame(self):
        pygame.init()
        self.screen = pygame.display.set_mode(
            (self.width, self.height), pygame.RESIZABLE
        )
        pygame.display.set_caption(f"Julia Set Viewer ({self.coordinator.backend_name.upper()})")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("monospace", 13)
        self.font_head = pygame.font.SysFont("monospace", 13, bold=True)

    # ── UI button layout ──────────────────────────────────────

    def _build_buttons(self):
        self.buttons = []
        self.sections = []
        px = self.width - PANEL_W + PANEL_PAD
        bw = PANEL_W - 2 * PANEL_PAD
        hw = (bw - BTN_GAP) // 2

        y = PANEL_PAD + 20
        pairs = [
            ("C REAL", "re", f"-{C_STEP}", f"+{C_STEP}"),
            ("C IMAG", "im", f"-{C_STEP}", f"+{C_STEP}"),
            ("ITERATIONS", "iter", f"-{ITER_STEP}", f"+{ITER_STEP}"),
            ("SCALE", "scale", f"-{SCALE_STEP}", f"+{SCALE_STEP}"),
            ("PRESET", "preset", "<", ">"),
        ]
        for heading, key, down_label, up_label in pairs:
            y += SECTION_GAP + 4
            self.sections.append((heading, key, y - 18, y + BTN_H + BTN_GAP))
            self.buttons.append((pygame.Rect(px, y, hw, BTN_H), down_label, f"{key}_down"))
            self.buttons.append((pygame.Rect(px + hw + BTN_GAP, y, hw, BTN_H), up_label, f"{key}_up"))
            y += BTN_H + BTN_GAP + 18

        y += SECTION_GAP + 4
        self.sections.append(("COLOR MODE", "mode", y - 18, y + BTN_H + BTN_GAP))
        self.buttons.append((pygame.Rect(px, y, bw, BTN_H), "Toggle", "mode_toggle"))
        y += BTN_H + BTN_GAP + 18

        y += SECTION_GAP
        self.buttons.append((pygame.Rect(px, y, bw, BTN_H), "Reset View", "reset"))
        y += BTN_H + BTN_GAP + 20

        self._panel_h = y + PANEL_PAD

    def _point_in_panel(self, x, y):
        if not self.panel_visible:
            return False
        return x >= self.width - PANEL_W and y <= self._panel_h

    def _handle_panel_click(self, pos):
        if not self._point_in_panel(*pos):
            return False
        for rect, _label, action in self.buttons:
            if rect.collidepoint(pos):
                self._do_action(action)
                break
        return True

    # ── Button actions ────────────────────────────────────────

    def _edit(self, transition, *args):
        """Apply a transition, keeping the previous value if it is rejected."""
        try:
            transition(*args)
        except ConfigurationError as exc:
            logger.warning("Rejected edit: %s", exc)

    def _do_action(self, action):
        coord = self.coordinator
        c = coord.params.c
        if action == "re_down":
            self._edit(coord.set_c, round(c.re - C_STEP, 6), c.im)
        elif action == "re_up":
            self._edit(coord.set_c, round(c.re + C_STEP, 6), c.im)
        elif action == "im_down":
            self._edit(coord.set_c, c.re, round(c.im - C_STEP, 6))
        elif action == "im_up":
            self._edit(coord.set_c, c.re, round(c.im + C_STEP, 6))
        elif action == "iter_down":
            self._edit(coord.set_max_iterations, max(0, coord.params.max_iterations - ITER_STEP))
        elif action == "iter_up":
            self._edit(coord.set_max_iterations, coord.params.max_iterations + ITER_STEP)
        elif action == "scale_down":
            self._edit(coord.set_scale, coord.params.scale - SCALE_STEP)
        elif action == "scale_up":
            self._edit(coord.set_scale, coord.params.scale + SCALE_STEP)
        elif action == "preset_down":
            self._select_preset((self.current_preset - 1) % len(PRESET_NAMES))
        elif action == "preset_up":
            self._select_preset((self.current_preset + 1) % len(PRESET_NAMES))
        elif action == "mode_toggle":
            coord.toggle_color_mode()
        elif action == "reset":
            coord.reset()

    def _select_preset(self, preset_idx):
        self.current_preset = preset_idx
        self._edit(self.coordinator.select_preset, PRESET_NAMES[preset_idx])

    # ── Frame presentation ────────────────────────────────────

    def render(self):
        frame = self.coordinator.render_if_needed()
        if frame is None:
            return
        height, width = frame.shape[:2]
        # frombuffer shares memory, so keep the array alive with the surface
        self.frame = frame
        self.surface = pygame.image.frombuffer(frame, (width, height), "RGBA")

    # ── HUD overlay (top-left info) ──────────────────────────

    def draw_overlay(self):
        params = self.coordinator.params
        mx, my = pygame.mouse.get_pos()
        mouse_z = pixel_to_complex(mx, my, params)

        lines = [
            f"c: ({params.c.re:.6g}, {params.c.im:.6g})",
            f"Scale: {params.scale:.1f} px/unit   Iter: {params.max_iterations}",
            f"Center: ({params.center[0]:.0f}, {params.center[1]:.0f})   Mode: {params.color_mode.value}",
            f"Mouse: ({mouse_z.re:.6g}, {mouse_z.im:.6g})",
            f"Backend: {self.coordinator.backend_name}   Render: {self.coordinator.last_render_time * 1000:.1f} ms",
        ]

        padding = 6
        lh = self.font.get_linesize()
        box_h = padding * 2 + lh * len(lines)
        box_w = padding * 2 + max(self.font.size(l)[0] for l in lines)

        overlay = pygame.Surface((box_w, box_h), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 160))
        for i, line in enumerate(lines):
            overlay.blit(self.font.render(line, True, COL_TEXT), (padding, padding + i * lh))
        self.screen.blit(overlay, (8, 8))

    # ── Control panel (right side) ───────────────────────────

    def _section_value(self, key):
        params = self.coordinator.params
        if key == "re":
            return f"{params.c.re:.4f}"
        if key == "im":
            return f"{params.c.im:.4f}"
        if key == "iter":
            return str(params.max_iterations)
        if key == "scale":
            return f"{params.scale:.1f}"
        if key == "preset":
            return PRESET_NAMES[self.current_preset]
        return params.color_mode.value

    def draw_panel(self):
        if not self.panel_visible:
            hint = self.font.render("[Tab] Controls", True, (180, 180, 180))
            hint_bg = pygame.Surface((hint.get_width() + 12, hint.get_height() + 8), pygame.SRCALPHA)
            hint_bg.fill((0, 0, 0, 120))
            hint_bg.blit(hint, (6, 4))
            self.screen.blit(hint_bg, (self.width - hint_bg.get_width() - 8, 8))
            return

        panel_x = self.width - PANEL_W
        panel = pygame.Surface((PANEL_W, self._panel_h), pygame.SRCALPHA)
        panel.fill(COL_BG)
        self.screen.blit(panel, (panel_x, 0))

        mx, my = pygame.mouse.get_pos()

        self.screen.blit(self.font_head.render("CONTROLS", True, COL_ACCENT),
                         (panel_x + PANEL_PAD, PANEL_PAD))

        for heading, key, heading_y, value_y in self.sections:
            self.screen.blit(self.font_head.render(heading, True, COL_HEADING),
                             (panel_x + PANEL_PAD, heading_y))
            self.screen.blit(self.font.render(self._section_value(key), True, COL_ACCENT),
                             (panel_x + PANEL_PAD, value_y))

        for rect, label, _action in self.buttons:
            color = COL_BTN_HOVER if rect.collidepoint(mx, my) else COL_BTN
            pygame.draw.rect(self.screen, color, rect, border_radius=4)
            pygame.draw.rect(self.screen, (80, 80, 100), rect, 1, border_radius=4)
            txt = self.font.render(label, True, COL_TEXT)
            tx = rect.x + (rect.w - txt.get_width()) // 2
            ty = rect.y + (rect.h - txt.get_height()) // 2
            self.screen.blit(txt, (tx, ty))

        hint = self.font.render("[Tab] Hide", True, (120, 120, 140))
        self.screen.blit(hint, (panel_x + PANEL_PAD, self._panel_h - 20))

    # ── Event handling ────────────────────────────────────────

    def handle_events(self):
        for event in pygame.event.get():
            self.handle_event(event)

    def handle_event(self, event):
        if event.type == pygame.QUIT:
            self.running = False
        elif event.type == pygame.KEYDOWN:
            self._handle_keydown(event)
        elif event.type == pygame.MOUSEBUTTONDOWN:
            if event.button == 1 and not self._handle_panel_click(event.pos):
                self.coordinator.recenter(*event.pos)
        elif event.type == pygame.MOUSEWHEEL:
            # Wheel up is a negative delta in the zoom convention
            if event.y and not self._point_in_panel(*pygame.mouse.get_pos()):
                self.coordinator.zoom(-event.y)
        elif event.type == pygame.VIDEORESIZE:
            self._handle_resize(event.w, event.h)

    def _handle_keydown(self, event):
        if event.key == pygame.K_ESCAPE:
            self.running = False
        elif event.key == pygame.K_TAB:
            self.panel_visible = not self.panel_visible
        elif event.key == pygame.K_LEFT:
            self._do_action("re_down")
        elif event.key == pygame.K_RIGHT:
            self._do_action("re_up")
        elif event.key == pygame.K_DOWN:
            self._do_action("im_down")
        elif event.key == pygame.K_UP:
            self._do_action("im_up")
        elif event.key in (pygame.K_MINUS, pygame.K_KP_MINUS):
            self._do_action("iter_down")
        elif event.key in (pygame.K_EQUALS, pygame.K_PLUS, pygame.K_KP_PLUS):
            self._do_action("iter_up")
        elif event.key == pygame.K_COMMA or event.key == pygame.K_LESS:
            self._do_action("preset_down")
        elif event.key == pygame.K_PERIOD or event.key == pygame.K_GREATER:
            self._do_action("preset_up")
        elif event.key == pygame.K_c:
            self._do_action("mode_toggle")
        elif event.key == pygame.K_PAGEUP:
            self._do_action("scale_up")
        elif event.key == pygame.K_PAGEDOWN:
            self._do_action("scale_down")
        elif event.key == pygame.K_r:
            self._do_action("reset")

    def _handle_resize(self, new_w, new_h):
        self.width = max(new_w, 64)
        self.height = max(new_h, 64)
        self.screen = pygame.display.set_mode(
            (self.width, self.height), pygame.RESIZABLE
        )
        self.coordinator.resize(self.width, self.height)
        self._build_buttons()

    # ── Main loop ─────────────────────────────────────────────

    def run(self):
        try:
            while self.running:
                self.handle_events()
                self.render()

                self.screen.fill((0, 0, 0))
                if self.surface is not None:
                    self.screen.blit(self.surface, (0, 0))
                self.draw_overlay()
                self.draw_panel()
                pygame.display.flip()

                self.clock.tick(60)
        finally:
            self.coordinator.renderer.close()
            pygame.quit()


def build_parser():
    parser = argparse.ArgumentParser(description="Interactive Julia set viewer.")
    parser.add_argument("--width", type=int, default=1280, help="initial window width in pixels")
    parser.add_argument("--height", type=int, default=720, help="initial window height in pixels")
    parser.add_argument("--cpu", action="store_true",
                        help="render with numpy on the CPU even if a CUDA device is available")
    parser.add_argument("--max-iterations", type=int, dest="max_iterations",
                        help="iteration cap per pixel")
    parser.add_argument("--color-mode", choices=[mode.value for mode in ColorMode],
                        dest="color_mode", help="initial color mode")
    parser.add_argument("--preset", choices=PRESET_NAMES, help="initial value of c")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    renderer = create_renderer(prefer_gpu=not args.cpu)
    coordinator = RedrawCoordinator(renderer, args.width, args.height)
    try:
        if args.max_iterations is not None:
            coordinator.set_max_iterations(args.max_iterations)
        if args.color_mode is not None:
            coordinator.set_color_mode(args.color_mode)
        if args.preset is not None:
            coordinator.select_preset(args.preset)
    except ConfigurationError as exc:
        renderer.close()
        parser.error(str(exc))

    viewer = JuliaViewer(coordinator, args.width, args.height)
    if args.preset is not None:
        viewer.current_preset = PRESET_NAMES.index(args.preset)
    viewer.run()


if __name__ == "__main__":
    main()
