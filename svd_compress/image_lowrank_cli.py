import argparse
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Tuple

import numpy as np
import pandas as pd

from .channels import compress_image, is_grayscale, singular_value_distribution
from .config import DEFAULT_MAX_ITERATIONS, DEFAULT_PERCENTAGE, DEFAULT_RANK
from .image_io import load_image, save_image
from .metrics import compression_ratio, compute_errors, compute_memory_usage
from .rank_selection import RankMode, resolve_rank

# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@dataclass
class CompressionSettings:
    """Options resolved from the command line."""

    image_path: Path
    mode: RankMode
    value: float
    exact_percentage: bool
    max_size: Optional[Tuple[int, int]]
    output_dir: Path
    seed: Optional[int]
    max_iterations: int


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def progress_printer(total_steps: int) -> Callable[[str], None]:
    """Progress observer printing the 20-80% band used for the SVD phases."""
    state = {"step": 0}

    def report(label: str) -> None:
        state["step"] += 1
        percent = 20 + state["step"] / total_steps * 60
        print(f"  [{percent:5.1f}%] {label}...")

    return report


def resolve_effective_rank(settings: CompressionSettings, pixels, width: int, height: int) -> int:
    """Pick k from the settings; exact percentage mode computes the spectrum first."""
    singular_values = None
    if settings.mode is RankMode.PERCENTAGE and settings.exact_percentage:
        print("Computing singular value distribution...")
        singular_values = singular_value_distribution(
            pixels, width, height, rng=settings.seed, max_iterations=settings.max_iterations
        )

    return resolve_rank(settings.value, settings.mode, width, height, singular_values=singular_values)


def save_singular_values_to_csv(singular_values: List[np.ndarray], grayscale: bool, output_path: Path) -> None:
    """Save one column of singular values per channel."""
    names = ["gray"] if grayscale else ["red", "green", "blue"]
    frame = pd.DataFrame({name: pd.Series(values) for name, values in zip(names, singular_values)})
    frame.index = frame.index + 1
    frame.index.name = "index"
    frame.to_csv(output_path)


def output_paths(settings: CompressionSettings, k: int) -> Tuple[Path, Path]:
    stem = settings.image_path.stem
    out_dir = settings.output_dir
    out_dir.mkdir(parents=True, exist_ok=True)
    return out_dir / f"{stem}_rank_{k:03d}.png", out_dir / f"{stem}_rank_{k:03d}_singular_values.csv"


# ---------------------------------------------------------------------------
# Main pipeline
# ---------------------------------------------------------------------------


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Compress an image with a truncated SVD computed by power iteration.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Keep 20 singular triplets per channel
  svd-compress photo.png -k 20

  # Keep ~90% of the energy, estimated from the image size
  svd-compress photo.png -p 90

  # Keep 90% of the energy, measured on the computed spectrum
  svd-compress photo.png -p 90 --exact-percentage --max-size 200 200
        """,
    )
    parser.add_argument("image_path", type=str, help="Path to input image file.")

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--rank", "-k",
        type=int,
        default=None,
        help=f"Number of singular values kept per channel (default: {DEFAULT_RANK}).",
    )
    mode.add_argument(
        "--percentage", "-p",
        type=float,
        default=None,
        help="Share of singular value energy to keep, in (0, 100].",
    )
    parser.add_argument(
        "--exact-percentage",
        action="store_true",
        help="Select the rank from the computed spectrum instead of the size-based estimate.",
    )
    parser.add_argument(
        "--max-size",
        type=int,
        nargs=2,
        metavar=("WIDTH", "HEIGHT"),
        default=None,
        help="Downscale the image to fit in WIDTH x HEIGHT before compressing.",
    )
    parser.add_argument(
        "--output-dir", "-o",
        type=str,
        default="results",
        help="Directory for the compressed image and CSV (default: results)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the power iteration start vectors.",
    )
    parser.add_argument(
        "--max-iterations",
        type=int,
        default=DEFAULT_MAX_ITERATIONS,
        help=f"Power iteration cap per singular triplet (default: {DEFAULT_MAX_ITERATIONS}).",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging from the engine.",
    )

    args = parser.parse_args(argv)

    if args.rank is not None and args.rank < 1:
        parser.error("--rank must be >= 1")
    if args.percentage is not None and not 0 < args.percentage <= 100:
        parser.error("--percentage must be in (0, 100]")
    if args.exact_percentage and args.rank is not None:
        parser.error("--exact-percentage only applies with --percentage")

    return args


def settings_from_args(args: argparse.Namespace) -> CompressionSettings:
    if args.percentage is not None:
        mode, value = RankMode.PERCENTAGE, args.percentage
    elif args.exact_percentage:
        mode, value = RankMode.PERCENTAGE, DEFAULT_PERCENTAGE
    else:
        mode, value = RankMode.COUNT, args.rank if args.rank is not None else DEFAULT_RANK

    return CompressionSettings(
        image_path=Path(args.image_path),
        mode=mode,
        value=value,
        exact_percentage=args.exact_percentage,
        max_size=tuple(args.max_size) if args.max_size else None,
        output_dir=Path(args.output_dir),
        seed=args.seed,
        max_iterations=args.max_iterations,
    )


def run(settings: CompressionSettings) -> Path:
    """Compress one image and write the PNG and singular value CSV."""
    pixels, width, height = load_image(settings.image_path, max_size=settings.max_size)
    grayscale = is_grayscale(pixels)

    print(f"Image: {settings.image_path} ({width} x {height}, {'grayscale' if grayscale else 'color'})")

    k = resolve_effective_rank(settings, pixels, width, height)
    max_rank = min(width, height)
    if k > max_rank:
        print(
            f"[warning] Requested rank={k} exceeds "
            f"min(image_height, image_width)={max_rank}. "
            f"Using rank={max_rank} instead."
        )
        k = max_rank

    if settings.mode is RankMode.PERCENTAGE:
        print(f"Rank for {settings.value:g}% energy: {k}")

    print("  [ 10.0%] Preparing image data...")
    result = compress_image(
        pixels,
        width,
        height,
        k,
        progress=progress_printer(3 if grayscale else 5),
        rng=settings.seed,
        max_iterations=settings.max_iterations,
    )
    print("  [ 90.0%] Writing compressed image...")

    image_path, csv_path = output_paths(settings, k)
    save_image(result.pixels, width, height, image_path)
    save_singular_values_to_csv(result.singular_values, result.is_grayscale, csv_path)

    ratio = compression_ratio(width, height, k, result.is_grayscale)
    lowrank_mb, full_mb = compute_memory_usage(
        (height, width), k, channels=1 if result.is_grayscale else 3
    )
    shape = (height, width, 4)
    frob_err, spec_err = compute_errors(
        np.asarray(pixels, dtype=float).reshape(shape)[:, :, :3],
        result.pixels.astype(float).reshape(shape)[:, :, :3],
    )

    print("  [100.0%] Done.")
    print(f"\nRank k: {k}")
    print(f"Singular values kept: {[len(s) for s in result.singular_values]}")
    print(f"Compression ratio: {ratio:.2f}:1")
    print(f"Memory: {lowrank_mb:.4f} MB low-rank vs {full_mb:.4f} MB full (float64)")
    print(f"Relative Frobenius error: {frob_err:.6f}, spectral error: {spec_err:.6f}")
    print(f"- Compressed image: {image_path}")
    print(f"- Singular values: {csv_path}")

    return image_path


def main(argv=None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )
    run(settings_from_args(args))


if __name__ == "__main__":
    main()
