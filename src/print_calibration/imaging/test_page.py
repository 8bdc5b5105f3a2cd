"""
Calibration test page generator.

Draws the page users print without correction and then measure: four dots
on a 100mm square centered on a landscape Letter page, plus a black border
whose outer edge sits BORDER_INSET_MM from every paper edge.

    A ---- B
    |      |
    D ---- C
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional, Union

from PIL import Image, ImageDraw, ImageFont

from print_calibration.calibration.constants import (
    BORDER_INSET_MM,
    BORDER_THICKNESS_MM,
    CALIBRATION_EXPECTED_DISTANCE_MM,
    PAGE_HEIGHT_PX,
    PAGE_WIDTH_PX,
    PRINT_DPI,
    mm_to_pixels,
    round_half_up,
)
from print_calibration.core.logging import get_logger
from print_calibration.imaging.corrector import write_png

logger = get_logger(__name__)

TITLE = "PRINT CALIBRATION TEST PAGE"

LINE_COLOR = "#888888"
INSTRUCTION_COLOR = "#555555"
LINE_WIDTH = 2

# (regular, bold) file names, in order of preference
FONT_FAMILIES = (
    ("DejaVuSans.ttf", "DejaVuSans-Bold.ttf"),
    ("LiberationSans-Regular.ttf", "LiberationSans-Bold.ttf"),
    ("Arial.ttf", "Arial Bold.ttf"),
    ("arial.ttf", "arialbd.ttf"),
    ("Helvetica.ttf", "Helvetica-Bold.ttf"),
)

# Checked after Pillow's own lookup of the bare file name
FONT_DIRS = (
    Path("/usr/share/fonts/truetype/dejavu"),
    Path("/usr/share/fonts/truetype/liberation"),
    Path("/usr/share/fonts/dejavu"),
    Path("/System/Library/Fonts"),
    Path("/Library/Fonts"),
    Path("C:/Windows/Fonts"),
)


def _font_candidates(bold: bool) -> Iterator[str]:
    for family in FONT_FAMILIES:
        filename = family[1] if bold else family[0]
        yield filename
        for font_dir in FONT_DIRS:
            yield str(font_dir / filename)


def _get_font(size: int, bold: bool = False) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """Load a sans-serif TrueType font at ``size`` px.

    Text is only there to guide the user, so any installed sans font will
    do. Pillow's built-in font is used when none is found.
    """
    for candidate in _font_candidates(bold):
        try:
            return ImageFont.truetype(candidate, size)
        except OSError:
            continue
    logger.debug("No TrueType font found; using Pillow's default at %spx", size)
    return ImageFont.load_default(size=size)


@dataclass(frozen=True)
class CalibrationPageLayout:
    """Pixel geometry of the calibration test page."""

    width: int = PAGE_WIDTH_PX
    height: int = PAGE_HEIGHT_PX
    dot_distance: int = mm_to_pixels(CALIBRATION_EXPECTED_DISTANCE_MM)
    dot_radius: int = round_half_up(PRINT_DPI * 0.07)
    border_inset: int = mm_to_pixels(BORDER_INSET_MM)
    border_thickness: int = mm_to_pixels(BORDER_THICKNESS_MM)
    label_font_size: int = round_half_up(PRINT_DPI * 0.15)
    title_font_size: int = round_half_up(PRINT_DPI * 0.18)
    instruction_font_size: int = round_half_up(PRINT_DPI * 0.1)
    footnote_font_size: int = round_half_up(PRINT_DPI * 0.09)

    @property
    def center(self) -> tuple[float, float]:
        return (self.width / 2, self.height / 2)

    @property
    def dots(self) -> dict[str, tuple[float, float]]:
        """Dot centers keyed by label, clockwise from top-left."""
        cx, cy = self.center
        half = self.dot_distance / 2
        return {
            "A": (cx - half, cy - half),
            "B": (cx + half, cy - half),
            "C": (cx + half, cy + half),
            "D": (cx - half, cy + half),
        }

    @property
    def border_box(self) -> tuple[int, int, int, int]:
        """Outer edge of the border as an inclusive (x0, y0, x1, y1) box."""
        inset = self.border_inset
        return (inset, inset, self.width - inset - 1, self.height - inset - 1)


class CalibrationTestPageGenerator:
    """Render the calibration test page.

    Output is deterministic: the same layout always gives the same pixels,
    and saved files carry no timestamps.
    """

    def __init__(self, layout: Optional[CalibrationPageLayout] = None):
        self.layout = layout or CalibrationPageLayout()

    def generate(self) -> Image.Image:
        """Draw the test page as an RGB image."""
        layout = self.layout
        img = Image.new("RGB", (layout.width, layout.height), "white")
        draw = ImageDraw.Draw(img)

        self._draw_border(draw)
        self._draw_dots(draw)
        self._draw_text(draw)

        return img

    def save(self, output_path: Union[str, Path]) -> Path:
        """Generate the page and write it as a PNG at PRINT_DPI."""
        path = write_png(self.generate(), output_path)
        logger.info(
            "Calibration test page written: %s (%sx%s at %s DPI)",
            path,
            self.layout.width,
            self.layout.height,
            PRINT_DPI,
        )
        return path

    def _draw_border(self, draw: ImageDraw.ImageDraw) -> None:
        # Pillow grows rectangle outlines inward from the box edge
        draw.rectangle(
            self.layout.border_box,
            outline="black",
            width=self.layout.border_thickness,
        )

    def _draw_dots(self, draw: ImageDraw.ImageDraw) -> None:
        dots = self.layout.dots
        r = self.layout.dot_radius

        for start, end in (("A", "B"), ("B", "C"), ("C", "D"), ("D", "A")):
            draw.line([dots[start], dots[end]], fill=LINE_COLOR, width=LINE_WIDTH)

        for x, y in dots.values():
            draw.ellipse([x - r, y - r, x + r, y + r], fill="black")

    def _draw_text(self, draw: ImageDraw.ImageDraw) -> None:
        layout = self.layout
        dots = layout.dots
        r = layout.dot_radius
        cx, _ = layout.center

        label_font = _get_font(layout.label_font_size)
        for label in ("A", "B"):
            x, y = dots[label]
            self._centered_text(draw, label, x, y - r - 20, label_font, "black")
        for label in ("C", "D"):
            x, y = dots[label]
            self._centered_text(draw, label, x, y + r + 60, label_font, "black")

        self._centered_text(
            draw,
            TITLE,
            cx,
            round_half_up(PRINT_DPI * 0.5),
            _get_font(layout.title_font_size, bold=True),
            "black",
        )

        instruction_font = _get_font(layout.instruction_font_size)
        self._centered_text(
            draw,
            f"Expected distance between adjacent dots: {CALIBRATION_EXPECTED_DISTANCE_MM:g}mm",
            cx,
            round_half_up(PRINT_DPI * 0.75),
            instruction_font,
            INSTRUCTION_COLOR,
        )
        self._centered_text(
            draw,
            "Measure A-B, B-C, C-D, D-A distances and border gaps (in mm)",
            cx,
            layout.height - round_half_up(PRINT_DPI * 0.6),
            instruction_font,
            INSTRUCTION_COLOR,
        )
        self._centered_text(
            draw,
            "Border: Measure white space from paper edge to black border. "
            f"Expected: {BORDER_INSET_MM:g}mm",
            cx,
            layout.height - round_half_up(PRINT_DPI * 0.4),
            _get_font(layout.footnote_font_size),
            INSTRUCTION_COLOR,
        )

    @staticmethod
    def _centered_text(
        draw: ImageDraw.ImageDraw,
        text: str,
        x: float,
        baseline_y: float,
        font: ImageFont.FreeTypeFont | ImageFont.ImageFont,
        fill: str,
    ) -> None:
        """Draw text horizontally centered on x, sitting on baseline_y."""
        left, _, right, bottom = draw.textbbox((0, 0), text, font=font)
        draw.text(
            (x - (right - left) / 2 - left, baseline_y - bottom),
            text,
            font=font,
            fill=fill,
        )


def generate_calibration_test_page(
    output_path: Optional[Union[str, Path]] = None,
) -> Union[Image.Image, Path]:
    """Generate the calibration test page.

    Args:
        output_path: Where to write the PNG. When omitted the image is
            returned instead of written.

    Returns:
        The written path, or the image when no path was given.
    """
    generator = CalibrationTestPageGenerator()
    if output_path is None:
        return generator.generate()
    return generator.save(output_path)
