"""
Control Panel Widgets for the Flow Field Viewer

Dark-themed widgets drawn straight onto a pygame surface. Sliders are
bound to config keys through the SLIDER_DEFS dicts in presets.py and
report (key, value) pairs; the panel scrolls when its content is taller
than the window.
"""

import pygame


THEME = {
    "bg": (0, 0, 0),
    "panel": (14, 14, 18),
    "track": (50, 50, 62),
    "track_fill": (235, 235, 240),
    "handle": (200, 205, 215),
    "handle_active": (255, 255, 255),
    "text": (175, 178, 186),
    "text_bright": (235, 237, 242),
    "text_dim": (95, 98, 108),
    "button": (36, 36, 46),
    "button_hover": (52, 52, 66),
    "button_active": (90, 90, 120),
    "danger": (120, 40, 48),
    "divider": (38, 38, 50),
    "scrollbar": (70, 70, 88),
}

SCROLL_STEP = 40


class Widget:
    """Base for panel widgets: a box in panel coordinates."""

    height = 18

    def __init__(self, x, y, width):
        self.x = x
        self.y = y
        self.width = width

    @property
    def rect(self):
        return pygame.Rect(self.x, self.y, self.width, self.height)

    def handle_event(self, event):
        return False

    def draw(self, surface, font):
        pass


class Slider(Widget):
    """Slider for one config key, built from a SLIDER_DEFS entry.

    Integer steps snap the value to int so the config keeps its types.
    on_change is called as on_change(key, value).
    """

    height = 38
    margin = 10

    def __init__(self, x, y, width, sdef, value, on_change=None):
        super().__init__(x, y, width)
        self.key = sdef["key"]
        self.label = sdef["label"]
        self.lo = sdef["min"]
        self.hi = sdef["max"]
        self.step = sdef.get("step")
        self.fmt = sdef.get("fmt", ".3f")
        self.integer = isinstance(self.step, int)
        self.on_change = on_change
        self.value = self._snap(value)
        self.dragging = False
        self.hovered = False

    @property
    def track(self):
        return pygame.Rect(self.x + self.margin, self.y + 22,
                           self.width - 2 * self.margin, 4)

    def _snap(self, value):
        value = max(self.lo, min(self.hi, value))
        if self.step:
            value = self.lo + round((value - self.lo) / self.step) * self.step
            value = max(self.lo, min(self.hi, value))
        return int(round(value)) if self.integer else value

    def position_of(self, value):
        track = self.track
        span = self.hi - self.lo
        frac = (value - self.lo) / span if span else 0.0
        return track.x + max(0.0, min(1.0, frac)) * track.width

    def value_at(self, px):
        track = self.track
        frac = max(0.0, min(1.0, (px - track.x) / track.width))
        return self._snap(self.lo + frac * (self.hi - self.lo))

    def _drag_to(self, px):
        value = self.value_at(px)
        if value != self.value:
            self.value = value
            if self.on_change:
                self.on_change(self.key, value)

    def set_value(self, value):
        """Move the handle without firing on_change."""
        self.value = self._snap(value)

    def handle_event(self, event):
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.track.inflate(8, 24).collidepoint(event.pos):
                self.dragging = True
                self._drag_to(event.pos[0])
                return True
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            self.dragging = False
        elif event.type == pygame.MOUSEMOTION:
            hx = self.position_of(self.value)
            mx, my = event.pos
            self.hovered = abs(mx - hx) < 12 and abs(my - self.track.centery) < 12
            if self.dragging:
                self._drag_to(mx)
                return True
        return False

    def draw(self, surface, font):
        surface.blit(font.render(self.label, True, THEME["text"]),
                     (self.x + self.margin, self.y + 2))
        text = font.render(f"{self.value:{self.fmt}}", True, THEME["text_bright"])
        surface.blit(text, (self.x + self.width - self.margin - text.get_width(), self.y + 2))

        track = self.track
        hx = self.position_of(self.value)
        pygame.draw.rect(surface, THEME["track"], track, border_radius=2)
        filled = track.copy()
        filled.width = int(hx - track.x)
        pygame.draw.rect(surface, THEME["track_fill"], filled, border_radius=2)

        active = self.dragging or self.hovered
        pygame.draw.circle(surface, THEME["handle_active" if active else "handle"],
                           (int(hx), track.centery), 8 if self.dragging else 6)


class Button(Widget):
    """Push button. Danger buttons (clear canvas) are tinted red."""

    height = 26

    def __init__(self, x, y, width, label, on_click=None, danger=False, height=None):
        super().__init__(x, y, width)
        if height is not None:
            self.height = height
        self.label = label
        self.on_click = on_click
        self.danger = danger
        self.active = False
        self.hovered = False

    def handle_event(self, event):
        if event.type == pygame.MOUSEMOTION:
            self.hovered = self.rect.collidepoint(event.pos)
        elif (event.type == pygame.MOUSEBUTTONDOWN and event.button == 1
              and self.rect.collidepoint(event.pos)):
            if self.on_click:
                self.on_click()
            return True
        return False

    def _fill(self):
        if self.active:
            return THEME["button_active"]
        if self.hovered:
            return THEME["button_hover"]
        return THEME["danger" if self.danger else "button"]

    def draw(self, surface, font):
        rect = self.rect
        pygame.draw.rect(surface, self._fill(), rect, border_radius=4)
        text = font.render(self.label, True, THEME["text_bright"])
        surface.blit(text, text.get_rect(center=rect.center))


class ButtonRow(Widget):
    """Radio group (presets, color modes); wraps onto extra lines."""

    gap = 4

    def __init__(self, x, y, width, labels, selected=0, on_select=None, button_height=24):
        super().__init__(x, y, width)
        self.labels = list(labels)
        self.on_select = on_select
        self.buttons = []

        bx, by = x, y
        for label in self.labels:
            bw = max(50, 7 * len(label) + 16)
            if bx > x and bx + bw > x + width:
                bx, by = x, by + button_height + self.gap
            self.buttons.append(Button(bx, by, bw, label, height=button_height))
            bx += bw + self.gap
        self.height = by - y + button_height
        self.select(selected)

    def select(self, index):
        """Highlight index without firing on_select; None clears."""
        self.selected = index
        for i, button in enumerate(self.buttons):
            button.active = i == index

    def handle_event(self, event):
        for i, button in enumerate(self.buttons):
            if button.handle_event(event):
                self.select(i)
                if self.on_select:
                    self.on_select(i, self.labels[i])
                return True
        return False

    def draw(self, surface, font):
        for button in self.buttons:
            button.draw(surface, font)


class Label(Widget):
    """One line of status text (FPS, loaded shape)."""

    def __init__(self, x, y, width, text="", dim=False):
        super().__init__(x, y, width)
        self.text = text
        self.dim = dim

    def draw(self, surface, font):
        color = THEME["text_dim" if self.dim else "text"]
        surface.blit(font.render(self.text, True, color), (self.x + 10, self.y))


class SectionHeader(Widget):
    height = 26

    def __init__(self, x, y, width, title):
        super().__init__(x, y, width)
        self.title = title

    def draw(self, surface, font):
        y = self.y + 8
        pygame.draw.line(surface, THEME["divider"], (self.x + 10, y), (self.x + self.width - 10, y))
        surface.blit(font.render(self.title, True, THEME["text_dim"]), (self.x + 10, y + 4))


class ControlPanel:
    """Side panel: stacks widgets top to bottom, scrolls with the wheel.

    Events arrive in window coordinates and are translated to panel
    content coordinates before reaching the widgets.
    """

    def __init__(self, x, y, width, height):
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        self.widgets = []
        self.scroll = 0
        self._cursor = 8

    def _push(self, widget, gap=4):
        self.widgets.append(widget)
        self._cursor += widget.height + gap
        return widget

    def add_section(self, title):
        return self._push(SectionHeader(0, self._cursor, self.width, title))

    def add_slider(self, sdef, value, on_change=None):
        return self._push(Slider(0, self._cursor, self.width, sdef, value, on_change))

    def add_button_row(self, labels, selected=0, on_select=None):
        row = ButtonRow(10, self._cursor, self.width - 20, labels, selected, on_select)
        return self._push(row, gap=8)

    def add_button(self, label, on_click=None, danger=False):
        button = Button(10, self._cursor, self.width - 20, label, on_click, danger=danger)
        return self._push(button, gap=6)

    def add_label(self, text="", dim=False):
        return self._push(Label(0, self._cursor, self.width, text, dim), gap=0)

    def add_spacer(self, height=8):
        self._cursor += height

    @property
    def content_height(self):
        return self._cursor + 8

    def scroll_by(self, dy):
        limit = max(0, self.content_height - self.height)
        self.scroll = max(0, min(limit, self.scroll + dy))

    def contains(self, pos):
        return (self.x <= pos[0] < self.x + self.width and
                self.y <= pos[1] < self.y + self.height)

    def handle_event(self, event):
        """Route a window event to the widgets. True if one consumed it."""
        if event.type == pygame.MOUSEWHEEL:
            if self.contains(pygame.mouse.get_pos()):
                self.scroll_by(-event.y * SCROLL_STEP)
                return True
            return False

        if hasattr(event, "pos"):
            if not self.contains(event.pos):
                # A drag released over the canvas still has to end
                if event.type == pygame.MOUSEBUTTONUP:
                    for widget in self.widgets:
                        if isinstance(widget, Slider):
                            widget.dragging = False
                return False
            local = dict(event.dict)
            local["pos"] = (event.pos[0] - self.x, event.pos[1] - self.y + self.scroll)
            event = pygame.event.Event(event.type, local)

        return any(widget.handle_event(event) for widget in self.widgets)

    def draw(self, target, font):
        content = pygame.Surface((self.width, max(self.height, self.content_height)))
        content.fill(THEME["panel"])
        for widget in self.widgets:
            widget.draw(content, font)

        target.blit(content, (self.x, self.y), area=pygame.Rect(0, self.scroll, self.width, self.height))
        pygame.draw.line(target, THEME["divider"], (self.x, self.y), (self.x, self.y + self.height))

        if self.content_height > self.height:
            bar_h = max(20, self.height * self.height // self.content_height)
            bar_y = self.y + (self.height - bar_h) * self.scroll // (self.content_height - self.height)
            pygame.draw.rect(target, THEME["scrollbar"],
                             pygame.Rect(self.x + self.width - 4, bar_y, 3, bar_h), border_radius=1)
