import math
from dataclasses import dataclass, fields, replace

from sigmosaic.errors import InvalidInputError


def _is_real(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


@dataclass(frozen=True)
class CollageConfig:
    """Numeric parameters for one collage.

    Valid ranges: grid_width and tile_size > 0, contrast_gain >= 0 (values
    above 1 boost contrast), visibility and signature_threshold in [0, 1].
    The output caps are optional; None leaves that axis uncapped.
    """

    grid_width: int
    tile_size: int
    contrast_gain: float
    visibility: float
    signature_threshold: float
    max_output_width: int | None = None
    max_output_height: int | None = None

    def validate(self) -> "CollageConfig":
        for name in ("grid_width", "tile_size"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise InvalidInputError(f"{name} must be a positive integer, got {value!r}", source=name)
        for name in ("contrast_gain", "visibility", "signature_threshold"):
            value = getattr(self, name)
            if not _is_real(value):
                raise InvalidInputError(f"{name} must be a finite number, got {value!r}", source=name)
        if self.contrast_gain < 0:
            raise InvalidInputError(f"contrast_gain must be >= 0, got {self.contrast_gain}", source="contrast_gain")
        for name in ("visibility", "signature_threshold"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise InvalidInputError(f"{name} must be within [0, 1], got {value}", source=name)
        for name in ("max_output_width", "max_output_height"):
            value = getattr(self, name)
            if value is not None and (not isinstance(value, int) or isinstance(value, bool) or value <= 0):
                raise InvalidInputError(f"{name} must be a positive integer or None, got {value!r}", source=name)
        return self


PROFILES = {
    # Memory-bounded variant: small grid, output capped at 4000x4000
    "standard": CollageConfig(
        grid_width=100,
        tile_size=40,
        contrast_gain=5.0,
        visibility=0.5,
        signature_threshold=0.5,
        max_output_width=4000,
        max_output_height=4000,
    ),
    # Larger grid with no output cap; memory grows with the portrait's aspect ratio
    "uncapped": CollageConfig(
        grid_width=150,
        tile_size=50,
        contrast_gain=5.0,
        visibility=0.5,
        signature_threshold=0.5,
    ),
}
DEFAULT_PROFILE = "standard"

_FIELD_NAMES = {f.name for f in fields(CollageConfig)}


def get_profile(name: str = DEFAULT_PROFILE, **overrides) -> CollageConfig:
    """Look up a named profile, apply non-None overrides and validate the result."""
    try:
        config = PROFILES[name]
    except KeyError:
        raise InvalidInputError(
            f"Unknown profile {name!r} (choose from {', '.join(sorted(PROFILES))})", source="profile"
        ) from None

    unknown = set(overrides) - _FIELD_NAMES
    if unknown:
        raise InvalidInputError(f"Unknown config fields: {', '.join(sorted(unknown))}", source="profile")

    changes = {k: v for k, v in overrides.items() if v is not None}
    if changes:
        config = replace(config, **changes)
    return config.validate()
