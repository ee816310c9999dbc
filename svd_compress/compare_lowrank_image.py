"""Compare the power-iteration SVD with LAPACK on image or synthetic matrices.

Shows how fast accuracy degrades as deflation errors accumulate at higher
ranks, alongside the storage ratio each rank buys.
"""

import argparse
from pathlib import Path

import numpy as np

from .benchmark_common import ComparisonRunner, ResultsVisualizer
from .config import DEFAULT_MAX_ITERATIONS
from .matrix_generators import MatrixGenerator


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Compare power-iteration SVD against LAPACK SVD across ranks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Sweep an image channel, downscaled to fit 128x128, every rank up to 40
  svd-sweep --image photo.jpg --max-size 128 128 -r 40

  # Synthetic rank-10 matrix with light noise, 8 sampled ranks
  svd-sweep --lowrank 100 80 10 --noise 0.1 -r 30 -k 8

  # Dense Gaussian matrix, every rank up to 20
  svd-sweep --random 60 40 -r 20
        """,
    )

    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--image-path", "--image",
        type=str,
        help="Path to input image file (PNG, JPG, etc.)",
    )
    source.add_argument(
        "--lowrank",
        type=int,
        nargs=3,
        metavar=("M", "N", "RANK"),
        help="Generate an M x N matrix of the given rank instead of loading an image",
    )
    source.add_argument(
        "--random",
        type=int,
        nargs=2,
        metavar=("M", "N"),
        help="Generate an M x N matrix with N(0, 1) entries",
    )
    parser.add_argument(
        "--noise",
        type=float,
        default=0.0,
        help="Noise level for --lowrank matrices (default: 0.0)",
    )
    parser.add_argument(
        "--channel",
        type=int,
        default=0,
        choices=[0, 1, 2],
        help="Image channel to decompose: 0=R, 1=G, 2=B (default: 0)",
    )
    parser.add_argument(
        "--max-size",
        type=int,
        nargs=2,
        metavar=("WIDTH", "HEIGHT"),
        default=None,
        help="Downscale the image to fit in WIDTH x HEIGHT first.",
    )
    parser.add_argument(
        "--max-rank", "-r",
        type=int,
        required=True,
        help="Maximum rank to test",
    )
    parser.add_argument(
        "--num-ranks", "-k",
        type=int,
        default=None,
        help="Number of ranks to test (evenly distributed). "
             "If not specified, tests every rank from 1 to max-rank.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed for reproducibility (default: 42)",
    )
    parser.add_argument(
        "--max-iterations",
        type=int,
        default=DEFAULT_MAX_ITERATIONS,
        help=f"Power iteration cap per triplet (default: {DEFAULT_MAX_ITERATIONS})",
    )
    parser.add_argument(
        "--output-dir", "-o",
        type=str,
        default="results",
        help="Directory to save plots (default: results)",
    )

    args = parser.parse_args(argv)

    if args.image_path is not None:
        image_path = Path(args.image_path)
        if not image_path.exists():
            parser.error(f"Image file not found: {args.image_path}")

        print(f"Loading image: {args.image_path}")
        A = MatrixGenerator.from_image(
            args.image_path,
            channel=args.channel,
            max_size=tuple(args.max_size) if args.max_size else None,
        )
        label = f"image_{image_path.stem}_{A.shape[0]}x{A.shape[1]}"
    elif args.random is not None:
        m, n = args.random
        A = MatrixGenerator.random_matrix(m, n, seed=args.seed)
        label = f"random_{m}x{n}"
    else:
        m, n, true_rank = args.lowrank
        A = MatrixGenerator.lowrank_with_noise(m, n, true_rank, args.noise, seed=args.seed)
        label = f"lowrank_r{true_rank}_noise{args.noise:g}_{m}x{n}"

    info = MatrixGenerator.get_matrix_info(A)
    print(f"\nMatrix properties:")
    print(f"  Dimensions: {info['shape'][0]} × {info['shape'][1]}")
    print(f"  Value range: [{info['min']:.1f}, {info['max']:.1f}]")
    print(f"  Mean: {info['mean']:.2f}, Std: {info['std']:.2f}")
    print(f"  Numerical rank: {info['estimated_rank']}")

    min_dim = min(A.shape)
    if args.max_rank > min_dim:
        parser.error(
            f"max-rank ({args.max_rank}) must not exceed "
            f"min matrix dimension ({min_dim})"
        )

    runner = ComparisonRunner(
        matrix=A,
        max_rank=args.max_rank,
        num_ranks=args.num_ranks,
        seed=args.seed,
        max_iterations=args.max_iterations,
        matrix_description=label,
    )
    results = runner.run_all()

    print("Generating plots...")
    visualizer = ResultsVisualizer(results, label=label)
    visualizer.plot_all(save_dir=args.output_dir)

    print("\n" + "=" * 60)
    print("SUMMARY STATISTICS")
    print("=" * 60)

    successful_results = [r for r in results if r.success]
    for method in visualizer.methods:
        method_results = [r for r in successful_results if r.method_name == method]
        if method_results:
            avg_time = np.mean([r.time_sec for r in method_results])
            avg_error_spectral = np.mean([r.error_spectral for r in method_results])
            avg_error_frobenius = np.mean([r.error_frobenius for r in method_results])
            avg_mem_kb = np.mean([r.memory_bytes / 1024 for r in method_results])
            print(f"\n{method}:")
            print(f"  Average time:            {avg_time:.4f}s")
            print(f"  Average spectral error:  {avg_error_spectral:.4f}")
            print(f"  Average Frobenius error: {avg_error_frobenius:.4f}")
            print(f"  Average memory:          {avg_mem_kb:.1f} KB")

    failed_results = [r for r in results if not r.success]
    if failed_results:
        print(f"\n{len(failed_results)} algorithm runs failed:")
        for r in failed_results:
            print(f"  {r.method_name} at rank {r.rank}: {r.error_message}")

    print("\nComparison complete!")
    return results


if __name__ == "__main__":
    main()
