import numpy as np

# ITU-R BT.601 luma weights
LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114])


def luminance(pixels: np.ndarray) -> np.ndarray:
    """Perceived brightness in [0, 1] for an (..., 3) RGB array."""
    return pixels.astype(np.float64) @ LUMA_WEIGHTS / 255.0


def ink_mask(pattern: np.ndarray, threshold: float) -> np.ndarray:
    """True where the signature pattern counts as ink.

    The comparison is strict: a pixel exactly at the threshold is background.
    """
    return luminance(pattern) < threshold


class TileCompositor:
    """Shades signature tiles with portrait colours.

    Ink pixels take the portrait colour darkened by ``visibility``;
    background pixels take the portrait colour unchanged. The ink mask is
    computed once and shared by every cell.
    """

    def __init__(self, pattern: np.ndarray, visibility: float, threshold: float):
        self.tile_size = pattern.shape[0]
        self.visibility = visibility
        self.threshold = threshold
        self.mask = ink_mask(pattern, threshold)
        self.mask.flags.writeable = False
        # Broadcastable over a (tile, n, tile, 3) band view
        self._band_mask = self.mask[:, np.newaxis, :, np.newaxis]

    def shade(self, colours: np.ndarray) -> np.ndarray:
        """Darken colours for ink pixels: floor(P * (1 - visibility)), clamped."""
        darkened = np.floor(colours.astype(np.float64) * (1.0 - self.visibility))
        return np.clip(darkened, 0, 255).astype(np.uint8)

    def new_band(self, count: int) -> np.ndarray:
        """Allocate a scratch buffer for compose_row with ``count`` cells."""
        return np.empty((self.tile_size, count * self.tile_size, 3), dtype=np.uint8)

    def compose_row(self, colours: np.ndarray, out: np.ndarray | None = None) -> np.ndarray:
        """Render a horizontal band of tiles, one per colour.

        Args:
            colours: (n, 3) uint8 portrait colours, left to right
            out: optional scratch buffer of shape (tile, n * tile, 3) to reuse

        Returns:
            (tile, n * tile, 3) uint8 band
        """
        colours = np.clip(np.asarray(colours), 0, 255).astype(np.uint8)
        n = colours.shape[0]
        ts = self.tile_size
        if out is None:
            out = self.new_band(n)
        elif out.shape != (ts, n * ts, 3) or not out.flags.c_contiguous:
            raise ValueError(f"Scratch buffer must be contiguous with shape {(ts, n * ts, 3)}, got {out.shape}")

        # (tile_y, cell, tile_x, channel) view over the band
        cells = out.reshape(ts, n, ts, 3)
        np.copyto(cells, colours[np.newaxis, :, np.newaxis, :])
        np.copyto(cells, self.shade(colours)[np.newaxis, :, np.newaxis, :], where=self._band_mask)
        return out

    def compose_tile(self, colour, out: np.ndarray | None = None) -> np.ndarray:
        """Render a single (tile, tile, 3) tile for one portrait colour."""
        return self.compose_row(np.asarray(colour).reshape(1, 3), out=out)
