import logging
import time

import numpy as np

from sigmosaic.assembler import assemble_canvas
from sigmosaic.codec import DEFAULT_QUALITY, ImageSource, decode_image, encode_image
from sigmosaic.compositor import TileCompositor
from sigmosaic.config import CollageConfig
from sigmosaic.grid import plan_grid
from sigmosaic.sampling import downsample_portrait, normalize_signature

logger = logging.getLogger(__name__)


def create_collage(
    portrait: ImageSource,
    signature: ImageSource,
    config: CollageConfig,
    workers: int | None = None,
) -> np.ndarray:
    """Build a signature photomosaic of the portrait.

    Returns the finished canvas as a (height, width, 3) uint8 array. Either
    every visible cell is drawn or an error is raised.
    """
    config.validate()
    portrait = decode_image(portrait, "portrait")
    signature = decode_image(signature, "signature")
    start = time.perf_counter()

    height, width = portrait.shape[:2]
    grid = plan_grid(width, height, config)
    logger.debug(
        "Grid %dx%d, tile %d, canvas %dx%d",
        grid.cols,
        grid.rows,
        grid.tile_size,
        grid.canvas_width,
        grid.canvas_height,
    )

    portrait_grid = downsample_portrait(portrait, grid)
    pattern = normalize_signature(signature, grid.tile_size, config.contrast_gain)
    compositor = TileCompositor(pattern, config.visibility, config.signature_threshold)
    canvas = assemble_canvas(portrait_grid, compositor, grid, workers=workers)

    logger.info(
        "Built %dx%d collage from %dx%d portrait in %.2fs",
        grid.canvas_width,
        grid.canvas_height,
        width,
        height,
        time.perf_counter() - start,
    )
    return canvas


def collage_to_bytes(
    portrait: ImageSource,
    signature: ImageSource,
    config: CollageConfig,
    workers: int | None = None,
    quality: int = DEFAULT_QUALITY,
) -> bytes:
    """Build a collage and encode it for download."""
    canvas = create_collage(portrait, signature, config, workers=workers)
    return encode_image(canvas, quality=quality)
