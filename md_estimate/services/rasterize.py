from __future__ import annotations

import logging
from pathlib import Path

"""Output writer / rasterizer.

``html`` output is written as-is. ``png`` / ``jpeg`` go through imgkit, which
drives the wkhtmltoimage binary; the import is deferred so HTML output works
without the engine installed.
"""

logger = logging.getLogger(__name__)

IMAGE_TYPES = ("png", "jpeg", "html")


class RasterizeError(Exception):
    """Raised when the output cannot be produced."""


def rasterize(html: str, output_path: Path, image_type: str = "png", quality: int = 100) -> Path:
    """Write ``html`` to ``output_path`` as HTML or as an image.

    Raises:
        RasterizeError: Unsupported type, missing imgkit / wkhtmltoimage, or engine failure
    """
    if image_type not in IMAGE_TYPES:
        raise RasterizeError("Invalid image type. Use 'png' or 'jpeg'.")

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        if image_type == "html":
            output_path.write_text(html, encoding="utf-8")
            return output_path
    except OSError as e:
        raise RasterizeError(f"cannot write {output_path}: {e}") from e

    try:
        import imgkit  # type: ignore
    except ImportError as e:
        raise RasterizeError(f"imgkit not available: {e}") from e

    options = {
        "format": "jpg" if image_type == "jpeg" else "png",
        "quality": str(quality),
        "encoding": "UTF-8",
        "quiet": "",
    }
    logger.debug(f"rasterize: {output_path} options={options}")
    try:
        imgkit.from_string(html, str(output_path), options=options)
    except (OSError, ValueError) as e:
        # imgkit reports a missing binary / render failure as OSError
        raise RasterizeError(f"image generation failed: {e}") from e
    return output_path
