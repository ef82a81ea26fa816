import io

import numpy as np
from PIL import Image

from sigmosaic.config import CollageConfig

BLACK = (0, 0, 0)
WHITE = (255, 255, 255)
GREY = (128, 128, 128)


def make_config(**overrides) -> CollageConfig:
    """Small, uncapped config suitable for fast tests."""
    values = dict(
        grid_width=4,
        tile_size=4,
        contrast_gain=1.0,
        visibility=0.5,
        signature_threshold=0.5,
    )
    values.update(overrides)
    return CollageConfig(**values)


def solid(width: int, height: int, colour=GREY) -> np.ndarray:
    return np.full((height, width, 3), colour, dtype=np.uint8)


def checkerboard() -> np.ndarray:
    """2x2 signature: black top-left and bottom-right, white elsewhere."""
    board = np.full((2, 2, 3), 255, dtype=np.uint8)
    board[0, 0] = BLACK
    board[1, 1] = BLACK
    return board


def png_bytes(pixels: np.ndarray) -> bytes:
    buf = io.BytesIO()
    Image.fromarray(pixels).save(buf, format="PNG")
    return buf.getvalue()
