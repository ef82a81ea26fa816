from dataclasses import dataclass

from sigmosaic.config import CollageConfig
from sigmosaic.errors import InvalidInputError


@dataclass(frozen=True)
class GridSpec:
    cols: int
    rows: int
    tile_size: int
    canvas_width: int
    canvas_height: int

    @property
    def visible_cols(self) -> int:
        """Columns whose whole tile fits on the canvas."""
        return min(self.cols, self.canvas_width // self.tile_size)

    @property
    def visible_rows(self) -> int:
        """Rows whose whole tile fits on the canvas."""
        return min(self.rows, self.canvas_height // self.tile_size)


def _cap(size: int, limit: int | None) -> int:
    return size if limit is None else min(size, limit)


def plan_grid(portrait_width: int, portrait_height: int, config: CollageConfig) -> GridSpec:
    """Derive the tiling grid and canvas size from the portrait's aspect ratio."""
    if portrait_width <= 0 or portrait_height <= 0:
        raise InvalidInputError(
            f"Portrait dimensions must be positive, got {portrait_width}x{portrait_height}", source="portrait"
        )

    cols = config.grid_width
    # Floor of the exact proportion; very wide portraits still get one row
    rows = max(1, cols * portrait_height // portrait_width)
    tile = config.tile_size

    return GridSpec(
        cols=cols,
        rows=rows,
        tile_size=tile,
        canvas_width=_cap(cols * tile, config.max_output_width),
        canvas_height=_cap(rows * tile, config.max_output_height),
    )
