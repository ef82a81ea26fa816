import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from sigmosaic.compositor import TileCompositor
from sigmosaic.grid import GridSpec

logger = logging.getLogger(__name__)


def _worker_count(workers: int | None, rows: int) -> int:
    if workers is None:
        workers = os.cpu_count() or 1
    return max(1, min(workers, rows))


def assemble_canvas(
    portrait_grid: np.ndarray,
    compositor: TileCompositor,
    grid: GridSpec,
    workers: int | None = None,
) -> np.ndarray:
    """Place one composited tile per visible grid cell onto a new canvas.

    Cells are clipped whole: a tile that would not fit entirely inside the
    (possibly capped) canvas is skipped, never scaled or partially drawn.
    Rows are rendered in a thread pool; each row writes a disjoint band of
    the canvas through its worker's own scratch buffer.
    """
    ts = grid.tile_size
    canvas = np.zeros((grid.canvas_height, grid.canvas_width, 3), dtype=np.uint8)
    rows, cols = grid.visible_rows, grid.visible_cols
    if rows == 0 or cols == 0:
        logger.debug("No whole tile fits on a %dx%d canvas", grid.canvas_width, grid.canvas_height)
        return canvas

    scratch = threading.local()

    def draw_row(y: int) -> None:
        band = getattr(scratch, "band", None)
        if band is None:
            band = scratch.band = compositor.new_band(cols)
        compositor.compose_row(portrait_grid[y, :cols], out=band)
        canvas[y * ts : (y + 1) * ts, : cols * ts] = band

    n_workers = _worker_count(workers, rows)
    logger.debug("Drawing %dx%d cells with %d worker(s)", cols, rows, n_workers)
    if n_workers == 1:
        for y in range(rows):
            draw_row(y)
    else:
        with ThreadPoolExecutor(max_workers=n_workers) as executor:
            # list() re-raises the first worker failure
            list(executor.map(draw_row, range(rows)))

    skipped = grid.cols * grid.rows - cols * rows
    if skipped:
        logger.info("Output cap omitted %d of %d cells", skipped, grid.cols * grid.rows)
    return canvas
