import numpy as np
from PIL import Image

from sigmosaic.errors import InvalidInputError
from sigmosaic.grid import GridSpec

MIDPOINT = 128


def _check_raster(pixels: np.ndarray, name: str) -> np.ndarray:
    """Validate an RGB raster and return it as a contiguous uint8 array."""
    if pixels.ndim != 3 or pixels.shape[2] != 3:
        raise InvalidInputError(f"{name} must be an RGB raster, got shape {pixels.shape}", source=name)
    if pixels.shape[0] == 0 or pixels.shape[1] == 0:
        raise InvalidInputError(f"{name} has zero width or height", source=name)
    return np.ascontiguousarray(pixels, dtype=np.uint8)


def _resize(pixels: np.ndarray, width: int, height: int, resample, box=None) -> np.ndarray:
    image = Image.fromarray(pixels)
    return np.asarray(image.resize((width, height), resample, box=box), dtype=np.uint8)


def downsample_portrait(portrait: np.ndarray, grid: GridSpec) -> np.ndarray:
    """Reduce the portrait to one representative colour per grid cell.

    Bicubic filtering averages neighbouring pixels, which matters more than
    sharpness here since each output pixel stands for a whole tile.
    Only cells that will be drawn are sampled, so a portrait far taller
    or wider than the output cap costs no more than the cap. The result
    matches resizing to the full grid and cropping the top-left corner.
    Returns array of shape (visible_rows, visible_cols, 3), at least 1x1.
    """
    portrait = _check_raster(portrait, "portrait")
    height, width = portrait.shape[:2]
    cols = max(1, grid.visible_cols)
    rows = max(1, grid.visible_rows)
    box = (0, 0, width * cols / grid.cols, height * rows / grid.rows)
    return _resize(portrait, cols, rows, Image.BICUBIC, box=box)


def enhance_contrast(pixels: np.ndarray, gain: float) -> np.ndarray:
    """Stretch each channel away from mid-grey: clamp((v - 128) * gain + 128).

    Results are truncated to integers. Pixels already at 0 or 255 stay there
    for any gain >= 1, so running this twice only pushes midtones further.
    """
    stretched = (pixels.astype(np.float64) - MIDPOINT) * gain + MIDPOINT
    return np.clip(stretched, 0, 255).astype(np.uint8)


def normalize_signature(signature: np.ndarray, tile_size: int, gain: float) -> np.ndarray:
    """Resize the signature to one tile and boost it towards a binary ink mask.

    Nearest-neighbour keeps strokes as hard edges; a smooth filter would
    blur them into gradients that straddle the ink threshold.
    Returns array of shape (tile_size, tile_size, 3).
    """
    signature = _check_raster(signature, "signature")
    tile = _resize(signature, tile_size, tile_size, Image.NEAREST)
    return enhance_contrast(tile, gain)
