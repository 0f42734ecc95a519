"""Downscale inline broker images before they are shared."""

from __future__ import annotations

import base64
import binascii
import io
import logging

from PIL import Image, UnidentifiedImageError


logger = logging.getLogger(__name__)


def compress_data_url(
    data_url: str,
    max_px: int = 600,
    quality: int = 65,
    fmt: str = "JPEG",
) -> str:
    """Resize a ``data:`` image so neither side exceeds ``max_px``.

    Use ``fmt="PNG"`` to keep transparency (logos). Hosted URLs and images
    that cannot be decoded are returned unchanged.
    """

    if not data_url.startswith("data:"):
        return data_url
    _, _, encoded = data_url.partition(",")
    try:
        image = Image.open(io.BytesIO(base64.b64decode(encoded)))
        image.load()
    except (binascii.Error, ValueError, UnidentifiedImageError, OSError) as exc:
        logger.warning("Keeping original image; could not decode it: %s", exc)
        return data_url

    scale = min(1.0, max_px / max(image.width, image.height))
    if scale < 1.0:
        size = (max(1, round(image.width * scale)), max(1, round(image.height * scale)))
        image = image.resize(size, Image.Resampling.LANCZOS)

    fmt = fmt.upper()
    if fmt == "JPEG" and image.mode != "RGB":
        # white behind transparent areas instead of black
        background = Image.new("RGB", image.size, (255, 255, 255))
        rgba = image.convert("RGBA")
        background.paste(rgba, mask=rgba.split()[-1])
        image = background

    buffer = io.BytesIO()
    if fmt == "JPEG":
        image.save(buffer, format="JPEG", quality=quality)
    else:
        image.save(buffer, format="PNG", optimize=True)
    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    return f"data:image/{fmt.lower()};base64,{encoded}"
