"""Image Processing for Club Name Overlays.

Renders the club name onto a transparent layer the size of the generated
logo and composites it over the image. Uses Pillow for drawing.

Text: white, horizontally centered, top edge at ~22% of image height.
Font size shrinks in fixed steps until the text fits 80% of the width
or the minimum size is reached.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from PIL import Image, ImageDraw, ImageFont, UnidentifiedImageError

from club_logos.config import PipelineSettings
from club_logos.errors import RenderError

logger = logging.getLogger(__name__)

TEXT_FILL = (255, 255, 255, 255)


@dataclass
class OverlayResult:
    """Result of rendering a club name onto a logo."""

    path: Path
    font_size: int
    text_width: float


def load_font(size: int, font_path: Optional[str] = None) -> ImageFont.FreeTypeFont:
    """Load a scalable font at the given size.

    Falls back to Pillow's bundled default font when the TrueType file
    cannot be found.
    """
    if font_path:
        try:
            return ImageFont.truetype(font_path, size)
        except OSError:
            logger.debug(f"Font {font_path} not found, using Pillow default")
    return ImageFont.load_default(size=size)


def measure_text(draw: ImageDraw.ImageDraw, text: str, font) -> float:
    """Rendered advance width of text in pixels."""
    return draw.textlength(text, font=font)


def fit_font_size(
    draw: ImageDraw.ImageDraw,
    text: str,
    image_width: int,
    settings: PipelineSettings,
) -> tuple[int, float]:
    """Find the font size at which text fits the allowed width.

    Starts at LOGOS_FONT_SIZE_START and steps down by LOGOS_FONT_SIZE_STEP
    while the width exceeds LOGOS_TEXT_MAX_WIDTH_RATIO of the image. Never
    goes below LOGOS_FONT_SIZE_MIN, so it terminates for any text length.

    Returns:
        (font_size, measured_width)
    """
    max_width = image_width * settings.LOGOS_TEXT_MAX_WIDTH_RATIO
    floor = settings.LOGOS_FONT_SIZE_MIN
    step = max(settings.LOGOS_FONT_SIZE_STEP, 1)

    font_size = max(settings.LOGOS_FONT_SIZE_START, floor)
    font = load_font(font_size, settings.LOGOS_FONT_PATH)
    text_width = measure_text(draw, text, font)

    while text_width > max_width and font_size > floor:
        font_size = max(font_size - step, floor)
        font = load_font(font_size, settings.LOGOS_FONT_PATH)
        text_width = measure_text(draw, text, font)

    return font_size, text_width


def render_text_layer(
    size: tuple[int, int],
    text: str,
    settings: PipelineSettings,
) -> tuple[Image.Image, int, float]:
    """Draw text on a transparent RGBA layer of the given size.

    Returns:
        (layer, font_size, text_width)
    """
    width, height = size

    layer = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    draw = ImageDraw.Draw(layer)

    font_size, text_width = fit_font_size(draw, text, width, settings)
    font = load_font(font_size, settings.LOGOS_FONT_PATH)

    # "ma" anchor: middle-x, ascender-top, so y is the top of the text line
    draw.text(
        (width / 2, height * settings.LOGOS_TEXT_TOP_RATIO),
        text,
        font=font,
        fill=TEXT_FILL,
        anchor="ma",
    )
    return layer, font_size, text_width


def add_text_to_image(
    input_path: str | Path,
    output_path: str | Path,
    text: str,
    settings: PipelineSettings,
) -> OverlayResult:
    """Overlay text on an image and save the result.

    Args:
        input_path: Source raster image (JPEG/PNG)
        output_path: Destination file, overwritten if present
        text: Text to render (club name)
        settings: Pipeline settings (font and placement)

    Returns:
        OverlayResult with destination path and chosen font size

    Raises:
        RenderError: If the source cannot be decoded or the output written
    """
    input_path = Path(input_path)
    output_path = Path(output_path)

    try:
        with Image.open(input_path) as src:
            base = src.convert("RGBA")
    except (OSError, UnidentifiedImageError, Image.DecompressionBombError) as e:
        raise RenderError(f"Cannot decode {input_path}: {e}") from e

    layer, font_size, text_width = render_text_layer(base.size, text, settings)
    base.alpha_composite(layer, (0, 0))

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        # JPEG has no alpha channel
        base.convert("RGB").save(output_path)
    except (OSError, ValueError) as e:
        raise RenderError(f"Cannot write {output_path}: {e}") from e

    logger.info(f"Final saved: {output_path} (font {font_size}px)")
    return OverlayResult(path=output_path, font_size=font_size, text_width=text_width)
