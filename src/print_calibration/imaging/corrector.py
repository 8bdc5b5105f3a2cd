"""
Image corrector for calibrated printing.

Fits a rendered card/flyer onto the target page, applies the printer's
scale calibration, pads clipped edges with white, and writes a print-ready
PNG at the print resolution.
"""

import io
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from PIL import Image, ImageOps

from print_calibration.calibration.border import calculate_border_compensation
from print_calibration.calibration.constants import (
    PRINT_DPI,
    inches_to_pixels,
    round_half_up,
)
from print_calibration.calibration.scale import calculate_calibration
from print_calibration.config import CalibrationSettings, ResampleMethod, get_settings
from print_calibration.core.exceptions import ImageDecodeError, ImageEncodeError
from print_calibration.core.logging import get_logger, log_operation
from print_calibration.core.models import (
    BorderCompensation,
    CalibrationMeasurement,
    CorrectionOptions,
    ScaleFactor,
)

logger = get_logger(__name__)

ImageSource = Union[str, Path, Image.Image, bytes]

# Modes written back unchanged; everything else is normalized first
_PRESERVED_MODES = ("L", "LA", "RGB", "RGBA")

_WHITE = {
    "L": 255,
    "LA": (255, 255),
    "RGB": (255, 255, 255),
    "RGBA": (255, 255, 255, 255),
}

_RESAMPLE_FILTERS = {
    ResampleMethod.LANCZOS: Image.Resampling.LANCZOS,
    ResampleMethod.BICUBIC: Image.Resampling.BICUBIC,
    ResampleMethod.BILINEAR: Image.Resampling.BILINEAR,
    ResampleMethod.NEAREST: Image.Resampling.NEAREST,
}


@dataclass
class CorrectionResult:
    """Result of a calibration correction."""

    image: Image.Image
    source_size: tuple[int, int]
    target_page_size: tuple[int, int]
    fit_scale: float
    scale: ScaleFactor
    scaled_size: tuple[int, int]
    final_size: tuple[int, int]
    padding: BorderCompensation
    source_path: Optional[Path] = None
    processing_notes: list[str] = field(default_factory=list)

    @property
    def output_size(self) -> tuple[int, int]:
        return self.image.size

    @property
    def was_clamped(self) -> bool:
        """True when calibration scaling had to be cut back to the page size."""
        return self.scaled_size != self.final_size

    def get_info(self) -> dict:
        """Get correction info as dictionary."""
        return {
            "source_size": f"{self.source_size[0]}x{self.source_size[1]}",
            "target_page_size": f"{self.target_page_size[0]}x{self.target_page_size[1]}",
            "fit_scale": round(self.fit_scale, 6),
            "scale_x": round(self.scale.scale_x, 6),
            "scale_y": round(self.scale.scale_y, 6),
            "is_calibrated": self.scale.is_calibrated,
            "final_size": f"{self.final_size[0]}x{self.final_size[1]}",
            "clamped": self.was_clamped,
            "padding": {
                "top": self.padding.top_px,
                "right": self.padding.right_px,
                "bottom": self.padding.bottom_px,
                "left": self.padding.left_px,
            },
            "output_size": f"{self.output_size[0]}x{self.output_size[1]}",
            "mode": self.image.mode,
            "notes": self.processing_notes,
        }


class ImageCorrector:
    """Apply printer calibration to raster images.

    Steps, in order:
    1. Target page size: page inches at PRINT_DPI, or the source size.
    2. Scale factors from raw measurements or precomputed values.
    3. Per-side padding from border measurements.
    4. Aspect-preserving fit of the source onto the page.
    5. Calibration scale on top of the fit, clamped to the page.
    6. Stretch to the final size, then pad with opaque white.
    """

    def __init__(self, settings: Optional[CalibrationSettings] = None):
        self.settings = settings or get_settings().calibration

    def load_image(self, source: ImageSource) -> Image.Image:
        """Load and fully decode an image.

        Raises:
            ImageDecodeError: If the source is missing or not a decodable image.
        """
        if isinstance(source, Image.Image):
            return source.copy()

        path = Path(source) if isinstance(source, (str, Path)) else None
        try:
            if path is not None:
                with Image.open(path) as img:
                    img.load()
                    return img.copy()
            elif isinstance(source, bytes):
                with Image.open(io.BytesIO(source)) as img:
                    img.load()
                    return img.copy()
        except (OSError, ValueError, Image.DecompressionBombError) as e:
            raise ImageDecodeError(
                f"Cannot read image: {e}",
                path=path,
            ) from e

        raise TypeError(f"Unsupported source type: {type(source)}")

    def resolve_page_size(
        self,
        source_size: tuple[int, int],
        options: CorrectionOptions,
    ) -> tuple[int, int]:
        """Target page size in pixels."""
        if options.has_page_size:
            return (
                inches_to_pixels(options.page_width_inches),
                inches_to_pixels(options.page_height_inches),
            )
        return source_size

    def resolve_scale(self, options: CorrectionOptions) -> ScaleFactor:
        """Scale factors from raw measurements or precomputed values."""
        calibration = options.calibration
        if isinstance(calibration, CalibrationMeasurement):
            return calculate_calibration(calibration)
        if isinstance(calibration, ScaleFactor):
            return calibration
        return ScaleFactor.identity()

    def resolve_padding(self, options: CorrectionOptions) -> BorderCompensation:
        """Per-side padding, zero when no border readings were given."""
        if options.border_calibration is None:
            return BorderCompensation.none()
        return calculate_border_compensation(
            options.border_calibration,
            expected_inset_mm=self.settings.expected_border_inset_mm,
        )

    @staticmethod
    def compute_final_size(
        source_size: tuple[int, int],
        page_size: tuple[int, int],
        scale: ScaleFactor,
    ) -> tuple[float, tuple[int, int], tuple[int, int]]:
        """Fit scale, calibrated size, and calibrated size clamped to the page.

        Returns:
            Tuple of (fit_scale, scaled_size, final_size).
        """
        src_w, src_h = source_size
        page_w, page_h = page_size

        fit_scale = min(page_w / src_w, page_h / src_h)

        scaled_w = max(1, round_half_up(src_w * fit_scale * scale.scale_x))
        scaled_h = max(1, round_half_up(src_h * fit_scale * scale.scale_y))

        final_size = (min(scaled_w, page_w), min(scaled_h, page_h))
        return fit_scale, (scaled_w, scaled_h), final_size

    def correct(
        self,
        source: ImageSource,
        options: Optional[CorrectionOptions] = None,
    ) -> CorrectionResult:
        """Apply calibration to an image.

        Args:
            source: Image path, PIL Image, or encoded bytes. PIL images are
                copied, never modified.
            options: Calibration, border, and page size options.

        Returns:
            CorrectionResult holding the new image and the geometry used.
        """
        options = options or CorrectionOptions()
        source_path = Path(source) if isinstance(source, (str, Path)) else None

        img = self.load_image(source)
        notes: list[str] = []

        img, mode_note = self._normalize_mode(img)
        if mode_note:
            notes.append(mode_note)

        source_size = img.size
        page_size = self.resolve_page_size(source_size, options)
        if options.has_page_size:
            notes.append(
                f"Page size {options.page_width_inches}in x {options.page_height_inches}in"
            )
        else:
            notes.append("Page size taken from source image")

        scale = self.resolve_scale(options)
        padding = self.resolve_padding(options)

        fit_scale, scaled_size, final_size = self.compute_final_size(source_size, page_size, scale)
        if scaled_size != final_size:
            notes.append(
                f"Calibrated size {scaled_size[0]}x{scaled_size[1]} clamped to "
                f"{final_size[0]}x{final_size[1]}"
            )

        logger.debug(
            "Correcting %sx%s -> page %sx%s: fit %.4f, scale (%.4f, %.4f), final %sx%s, padding %s",
            source_size[0],
            source_size[1],
            page_size[0],
            page_size[1],
            fit_scale,
            scale.scale_x,
            scale.scale_y,
            final_size[0],
            final_size[1],
            padding.as_padding(),
        )

        resized = img.resize(final_size, resample=_RESAMPLE_FILTERS[self.settings.resample])
        if padding.is_zero:
            corrected = resized
        else:
            corrected = ImageOps.expand(
                resized,
                border=padding.as_padding(),
                fill=_WHITE[resized.mode],
            )
            notes.append(
                "Padded (top/right/bottom/left): "
                f"{padding.top_px}/{padding.right_px}/{padding.bottom_px}/{padding.left_px}px"
            )

        return CorrectionResult(
            image=corrected,
            source_size=source_size,
            target_page_size=page_size,
            fit_scale=fit_scale,
            scale=scale,
            scaled_size=scaled_size,
            final_size=final_size,
            padding=padding,
            source_path=source_path,
            processing_notes=notes,
        )

    def export(
        self,
        result: Union[CorrectionResult, Image.Image],
        output_path: Union[str, Path],
    ) -> Path:
        """Write a corrected image as PNG at PRINT_DPI.

        The file is written beside the target and moved into place, so a
        failed write never leaves a partial file at ``output_path``.

        Raises:
            ImageEncodeError: If encoding or writing fails.
        """
        img = result.image if isinstance(result, CorrectionResult) else result
        return write_png(img, output_path, compress_level=self.settings.png_compress_level)

    def apply_calibration_to_png(
        self,
        input_path: Union[str, Path],
        output_path: Union[str, Path],
        options: Optional[CorrectionOptions] = None,
    ) -> Path:
        """Correct an image file and write the print-ready PNG.

        Returns:
            Path to the written PNG.
        """
        with log_operation(logger, f"apply_calibration {Path(input_path).name}"):
            result = self.correct(input_path, options)
            path = self.export(result, output_path)
        logger.info(
            "Calibrated PNG written: %s (%sx%s)",
            path,
            result.output_size[0],
            result.output_size[1],
        )
        return path

    @staticmethod
    def _normalize_mode(img: Image.Image) -> tuple[Image.Image, Optional[str]]:
        """Convert unusual modes to one that can be padded with white."""
        if img.mode in _PRESERVED_MODES:
            return img, None
        if img.mode == "1":
            target = "L"
        elif img.mode in ("PA", "La", "RGBa") or "transparency" in img.info:
            target = "RGBA"
        else:
            target = "RGB"
        return img.convert(target), f"Converted {img.mode} to {target}"


def write_png(
    img: Image.Image,
    output_path: Union[str, Path],
    compress_level: int = 6,
    dpi: int = PRINT_DPI,
) -> Path:
    """Atomically write an image as PNG tagged with the print resolution.

    Raises:
        ImageEncodeError: If encoding or writing fails.
    """
    output_path = Path(output_path)
    tmp_name: Optional[str] = None
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{output_path.stem}-",
            suffix=".png",
            dir=output_path.parent,
        )
        with os.fdopen(fd, "wb") as fh:
            img.save(fh, format="PNG", dpi=(dpi, dpi), compress_level=compress_level)
        os.replace(tmp_name, output_path)
        tmp_name = None
    except (OSError, ValueError) as e:
        raise ImageEncodeError(f"Cannot write PNG: {e}", path=output_path) from e
    finally:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
    return output_path


def apply_calibration_to_png(
    input_path: Union[str, Path],
    output_path: Union[str, Path],
    options: Optional[CorrectionOptions] = None,
) -> Path:
    """Module-level shortcut for ImageCorrector().apply_calibration_to_png."""
    return ImageCorrector().apply_calibration_to_png(input_path, output_path, options)
