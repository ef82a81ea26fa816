import io
from pathlib import Path
from typing import BinaryIO

import numpy as np
from PIL import Image, UnidentifiedImageError

from sigmosaic.errors import DecodeError, EncodeError, InvalidInputError

CONTENT_TYPE = "image/jpeg"
OUTPUT_FORMAT = "JPEG"
DEFAULT_QUALITY = 85

ImageSource = bytes | str | Path | BinaryIO | Image.Image | np.ndarray


def decode_image(source: ImageSource, name: str = "image") -> np.ndarray:
    """Read a source into an RGB array of shape (height, width, 3).

    Accepts encoded bytes, a path, a binary file object, a PIL image or an
    already decoded array. Only the first frame of multi-frame files is used.
    """
    if isinstance(source, np.ndarray):
        pixels = source
    else:
        if isinstance(source, Image.Image):
            image = source
        else:
            if isinstance(source, (bytes, bytearray)):
                source = io.BytesIO(source)
            try:
                image = Image.open(source)
                image.load()
            except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as exc:
                raise DecodeError(f"Cannot read {name} as an image: {exc}", source=name) from exc
        try:
            pixels = np.asarray(image.convert("RGB"), dtype=np.uint8)
        except (OSError, ValueError) as exc:
            raise DecodeError(f"Cannot convert {name} to RGB: {exc}", source=name) from exc

    if pixels.ndim != 3 or pixels.shape[2] != 3:
        raise InvalidInputError(f"{name} must be an RGB raster, got shape {pixels.shape}", source=name)
    if pixels.shape[0] == 0 or pixels.shape[1] == 0:
        raise InvalidInputError(f"{name} has zero width or height", source=name)
    return pixels


def encode_image(canvas: np.ndarray, quality: int = DEFAULT_QUALITY) -> bytes:
    """Compress a finished canvas to JPEG bytes."""
    if canvas.ndim != 3 or canvas.shape[2] != 3 or canvas.dtype != np.uint8:
        raise EncodeError(f"Canvas must be a uint8 RGB array, got {canvas.dtype} {canvas.shape}", source="canvas")
    if canvas.shape[0] == 0 or canvas.shape[1] == 0:
        raise EncodeError("Canvas is empty", source="canvas")

    buf = io.BytesIO()
    try:
        Image.fromarray(canvas).save(buf, format=OUTPUT_FORMAT, quality=quality)
    except (OSError, ValueError) as exc:
        raise EncodeError(f"Failed to encode collage: {exc}", source="canvas") from exc
    return buf.getvalue()
