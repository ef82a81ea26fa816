import argparse
import logging
import sys
from pathlib import Path

from sigmosaic.codec import DEFAULT_QUALITY
from sigmosaic.config import DEFAULT_PROFILE, PROFILES, get_profile
from sigmosaic.converter import collage_to_bytes
from sigmosaic.errors import CollageError

logger = logging.getLogger("sigmosaic")


def _setup_logging(debug: bool = False):
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Tile a portrait with copies of a signature")
    parser.add_argument("portrait", help="Path to the portrait image")
    parser.add_argument("signature", help="Path to the signature or logo image")
    parser.add_argument(
        "-o", "--output", default="signature_collage.jpg", help="Output JPEG path (default: signature_collage.jpg)"
    )
    parser.add_argument(
        "-p",
        "--profile",
        default=DEFAULT_PROFILE,
        choices=sorted(PROFILES),
        help=f"Configuration profile (default: {DEFAULT_PROFILE})",
    )
    parser.add_argument("--grid-width", type=int, default=None, help="Number of tile columns")
    parser.add_argument("--tile-size", type=int, default=None, help="Tile edge length in pixels")
    parser.add_argument("--gain", type=float, default=None, help="Signature contrast gain (>1 boosts contrast)")
    parser.add_argument("--visibility", type=float, default=None, help="How much ink darkens a tile, 0-1")
    parser.add_argument("--threshold", type=float, default=None, help="Luminance below which a pixel is ink, 0-1")
    parser.add_argument("--max-width", type=int, default=None, help="Cap on output width in pixels")
    parser.add_argument("--max-height", type=int, default=None, help="Cap on output height in pixels")
    parser.add_argument("-j", "--workers", type=int, default=None, help="Worker threads (default: CPU count)")
    parser.add_argument(
        "-q", "--quality", type=int, default=DEFAULT_QUALITY, help=f"JPEG quality (default: {DEFAULT_QUALITY})"
    )
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    _setup_logging(args.debug)

    for path in (Path(args.portrait), Path(args.signature)):
        if not path.exists():
            print(f"File not found: {path}", file=sys.stderr)
            return 1

    try:
        config = get_profile(
            args.profile,
            grid_width=args.grid_width,
            tile_size=args.tile_size,
            contrast_gain=args.gain,
            visibility=args.visibility,
            signature_threshold=args.threshold,
            max_output_width=args.max_width,
            max_output_height=args.max_height,
        )
        data = collage_to_bytes(args.portrait, args.signature, config, workers=args.workers, quality=args.quality)
    except CollageError as exc:
        logger.error("%s", exc)
        return 1

    output = Path(args.output)
    output.write_bytes(data)
    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
