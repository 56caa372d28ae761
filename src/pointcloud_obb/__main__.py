"""Command-line entry point: fit an oriented bounding box to a point cloud file."""

import argparse
import logging
import sys
from pathlib import Path

import numpy as np

from .config import AppConfig
from .core.messages.obb import OrientedBoundingBox
from .geometry.fit import fit_oriented_bounding_box

logger = logging.getLogger(__name__)

TEXT_SUFFIXES = {".xyz", ".txt", ".pts", ".csv"}


def configure_logging(debug: bool) -> None:
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG if debug else logging.INFO)
    formatter = logging.Formatter("[%(levelname)s] [%(name)s]: %(message)s")
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)
    root_logger.setLevel(logging.DEBUG if debug else logging.INFO)


def load_point_cloud(path: Path | str) -> np.ndarray:
    """
    Load a point cloud from disk.

    ``.npy`` files are read with ``numpy.load``; ``.xyz``, ``.txt``, ``.pts``
    and ``.csv`` files are read as one point per row, whitespace or comma
    separated. Columns after x, y, z are kept and ignored by the fit.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file type is not supported
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Point cloud file not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".npy":
        return np.load(path)
    if suffix in TEXT_SUFFIXES:
        delimiter = "," if suffix == ".csv" else None
        return np.loadtxt(path, delimiter=delimiter, ndmin=2)

    raise ValueError(
        f"Unsupported point cloud format {suffix!r}, expected .npy or {sorted(TEXT_SUFFIXES)}"
    )


def encode_box(box: OrientedBoundingBox, config: AppConfig) -> bytes:
    output = config.output
    if output.format == "msgpack":
        return box.to_bytes()
    if output.format == "frame":
        return box.to_frame(output.frame_precision)
    return (" ".join(repr(v) for v in box.serialize()) + "\n").encode()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Fit an oriented bounding box to a point cloud")
    parser.add_argument("cloud", type=str, help="Point cloud file (.npy, .xyz, .txt, .pts, .csv)")
    parser.add_argument("--config", type=str, help="Path to config.yaml")
    parser.add_argument("--format", choices=["text", "msgpack", "frame"], help="Output encoding")
    parser.add_argument("--output", type=str, help="Write to this file instead of stdout")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    config = AppConfig.from_yaml(args.config)
    if args.format is not None:
        output = config.output.model_copy(update={"format": args.format})
        config = config.model_copy(update={"output": output})
    if args.debug:
        config = config.model_copy(update={"debug": True})

    configure_logging(config.debug)

    try:
        cloud = load_point_cloud(args.cloud)
        box = fit_oriented_bounding_box(cloud, config.fit)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to fit bounding box: {e}")
        return 1

    logger.info(
        f"Fitted box from {args.cloud}: "
        f"extents=({box.width:.6g}, {box.height:.6g}, {box.depth:.6g})"
    )

    payload = encode_box(box, config)
    if args.output:
        Path(args.output).write_bytes(payload)
        logger.info(f"Wrote {len(payload)} bytes to {args.output}")
    else:
        sys.stdout.buffer.write(payload)
        sys.stdout.buffer.flush()

    return 0


if __name__ == "__main__":
    sys.exit(main())
