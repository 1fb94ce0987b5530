"""
Roadmap infographic renderer.

Images are described as a Layout of simple shapes first, then rasterized
with Pillow. Layout builders are pure so geometry can be tested without
decoding pixels.
"""
import io
import logging
import math
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Optional, Sequence, Tuple, Union

from PIL import Image, ImageDraw, ImageFont

logger = logging.getLogger(__name__)

CANVAS_WIDTH = 1792
CANVAS_HEIGHT = 1024
BACKGROUND = "#ffffff"
TITLE_COLOR = "#1e3a8a"
TEXT_COLOR = "#1f2937"

INFOGRAPHIC_PALETTE = ("#2563eb", "#7c3aed", "#059669")
INFOGRAPHIC_LINE = "#3b82f6"

MILESTONE_MAX_STEPS = 7
MILESTONE_PALETTE = ("#2563eb", "#0891b2", "#059669", "#65a30d", "#d97706", "#dc2626", "#7c3aed")
MILESTONE_BLOCK_FILL = "#dbeafe"
MILESTONE_BLOCK_BORDER = "#2563eb"
MILESTONE_PATH = "#94a3b8"

# Glyph width estimate relative to font size, used for wrapping
AVG_CHAR_WIDTH_RATIO = 0.6

BOLD_FONT_CANDIDATES = ("DejaVuSans-Bold.ttf", "Arial Bold.ttf", "arialbd.ttf")
REGULAR_FONT_CANDIDATES = ("DejaVuSans.ttf", "Arial.ttf", "arial.ttf")


@dataclass
class RoadmapStep:
    number: int
    title: str
    description: str = ""


@dataclass
class Rect:
    x0: float
    y0: float
    x1: float
    y1: float
    fill: str
    outline: Optional[str] = None
    width: int = 0
    radius: int = 0


@dataclass
class Ellipse:
    cx: float
    cy: float
    r: float
    fill: str
    outline: Optional[str] = None
    width: int = 0


@dataclass
class Line:
    points: List[Tuple[float, float]]
    color: str
    width: int = 4


@dataclass
class TextRun:
    """Text centered horizontally on `x`, top edge at `y`."""
    x: float
    y: float
    text: str
    size: int
    color: str = TEXT_COLOR
    bold: bool = True


Shape = Union[Rect, Ellipse, Line, TextRun]


@dataclass
class Layout:
    width: int
    height: int
    shapes: List[Shape] = field(default_factory=list)
    background: str = BACKGROUND

    def of_type(self, kind) -> list:
        return [s for s in self.shapes if isinstance(s, kind)]


def wrap_text(text: str, max_width: float, font_size: float) -> List[str]:
    """
    Greedy word wrap using an average glyph width estimate.

    A word longer than the line budget gets a line of its own. Returns
    `[text]` when nothing would be produced (e.g. empty input).
    """
    max_chars = math.floor(max_width / (font_size * AVG_CHAR_WIDTH_RATIO))
    lines: List[str] = []
    current = ""
    for word in text.split():
        candidate = f"{current} {word}" if current else word
        if len(candidate) <= max_chars or not current:
            current = candidate
        else:
            lines.append(current)
            current = word
    if current:
        lines.append(current)
    return lines or [text]


def _title_shapes(career_name: str, width: int) -> List[Shape]:
    return [TextRun(width / 2, 60, f"{career_name} Career Roadmap", 72, TITLE_COLOR)]


def build_infographic_layout(career_name: str, steps: Sequence[RoadmapStep]) -> Layout:
    """Steps spaced evenly along a horizontal timeline."""
    layout = Layout(CANVAS_WIDTH, CANVAS_HEIGHT)
    layout.shapes.extend(_title_shapes(career_name, layout.width))

    n = len(steps)
    if n == 0:
        return layout

    spacing = layout.width / (n + 1)
    line_y = layout.height / 2
    radius = 50
    layout.shapes.append(Line([(spacing, line_y), (layout.width - spacing, line_y)], INFOGRAPHIC_LINE, 8))

    title_size = 36
    for i, step in enumerate(steps):
        x = spacing * (i + 1)
        color = INFOGRAPHIC_PALETTE[i % len(INFOGRAPHIC_PALETTE)]
        layout.shapes.append(Ellipse(x, line_y, radius, color, outline="#ffffff", width=4))
        layout.shapes.append(TextRun(x, line_y - 26, str(step.number), 42, "#ffffff"))
        for j, line in enumerate(wrap_text(step.title, spacing * 0.9, title_size)):
            layout.shapes.append(TextRun(x, line_y + radius + 30 + j * (title_size + 8), line, title_size, TEXT_COLOR))
    return layout


def build_milestone_layout(career_name: str, steps: Sequence[RoadmapStep]) -> Layout:
    """
    Up to MILESTONE_MAX_STEPS milestones climbing diagonally from bottom-left
    to top-right. Extra steps are dropped.
    """
    layout = Layout(CANVAS_WIDTH, CANVAS_HEIGHT)
    layout.shapes.extend(_title_shapes(career_name, layout.width))

    visible = list(steps[:MILESTONE_MAX_STEPS])
    n = len(visible)
    if n == 0:
        return layout

    x_start, x_end = layout.width * 0.12, layout.width * 0.88
    y_start, y_end = layout.height * 0.75, layout.height * 0.25

    points = []
    for i in range(n):
        t = i / (n - 1) if n > 1 else 0.0
        points.append((x_start + (x_end - x_start) * t, y_start + (y_end - y_start) * t))

    if n > 1:
        layout.shapes.append(Line(points, MILESTONE_PATH, 6))

    title_size = 32
    block_w, block_h = 120, 60
    for i, (step, (x, y)) in enumerate(zip(visible, points)):
        color = MILESTONE_PALETTE[i % len(MILESTONE_PALETTE)]
        layout.shapes.append(Rect(
            x - block_w / 2, y - block_h / 2, x + block_w / 2, y + block_h / 2,
            MILESTONE_BLOCK_FILL, outline=MILESTONE_BLOCK_BORDER, width=3, radius=10,
        ))
        layout.shapes.append(Ellipse(x, y - block_h / 2 - 34, 30, color))
        layout.shapes.append(TextRun(x, y - block_h / 2 - 52, str(step.number), 30, "#ffffff"))
        for j, line in enumerate(wrap_text(step.title, 350, title_size)):
            layout.shapes.append(TextRun(x, y + block_h / 2 + 14 + j * (title_size + 6), line, title_size, TEXT_COLOR))
    return layout


@lru_cache(maxsize=32)
def _font(size: int, bold: bool):
    for candidate in BOLD_FONT_CANDIDATES if bold else REGULAR_FONT_CANDIDATES:
        try:
            return ImageFont.truetype(candidate, size)
        except OSError:
            continue
    logger.warning(f"No TrueType font found, falling back to Pillow default: size={size}")
    return ImageFont.load_default(size=size)


def rasterize(layout: Layout) -> bytes:
    """Draw a layout and return PNG bytes."""
    img = Image.new("RGB", (layout.width, layout.height), layout.background)
    draw = ImageDraw.Draw(img)

    for shape in layout.shapes:
        if isinstance(shape, Rect):
            box = (shape.x0, shape.y0, shape.x1, shape.y1)
            if shape.radius:
                draw.rounded_rectangle(box, radius=shape.radius, fill=shape.fill, outline=shape.outline, width=shape.width)
            else:
                draw.rectangle(box, fill=shape.fill, outline=shape.outline, width=shape.width)
        elif isinstance(shape, Ellipse):
            box = (shape.cx - shape.r, shape.cy - shape.r, shape.cx + shape.r, shape.cy + shape.r)
            draw.ellipse(box, fill=shape.fill, outline=shape.outline, width=shape.width)
        elif isinstance(shape, Line):
            draw.line(shape.points, fill=shape.color, width=shape.width, joint="curve")
        elif isinstance(shape, TextRun):
            font = _font(shape.size, shape.bold)
            text_width = draw.textlength(shape.text, font=font)
            draw.text((shape.x - text_width / 2, shape.y), shape.text, fill=shape.color, font=font)
        else:
            raise TypeError(f"Unsupported shape: {type(shape).__name__}")

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def render_infographic(career_name: str, steps: Sequence[RoadmapStep]) -> bytes:
    png = rasterize(build_infographic_layout(career_name, steps))
    logger.info(f"Rendered infographic: career={career_name}, steps={len(steps)}, bytes={len(png)}")
    return png


def render_milestone_roadmap(career_name: str, steps: Sequence[RoadmapStep]) -> bytes:
    png = rasterize(build_milestone_layout(career_name, steps))
    logger.info(f"Rendered milestone roadmap: career={career_name}, steps={min(len(steps), MILESTONE_MAX_STEPS)}, bytes={len(png)}")
    return png
