"""Shared benchmarking infrastructure for the SVD engine.

Runs the power-iteration SVD next to the LAPACK baseline over a sweep of
ranks and collects time, accuracy, memory and storage figures.
"""

import time
import tracemalloc
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Callable, List, Optional

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from .algos import numpy_svd_lowrank, power_svd, reconstruct
from .config import DEFAULT_MAX_ITERATIONS
from .metrics import compression_ratio


@dataclass
class BenchmarkResult:
    """Store results for a single algorithm at a single rank."""

    method_name: str
    rank: int
    time_sec: float
    error_spectral: float
    error_frobenius: float
    memory_bytes: int
    triplets: int = 0
    compression_ratio: float = 0.0
    success: bool = True
    error_message: str = ""


class AlgorithmBenchmark:
    """Benchmark a single algorithm returning a Decomposition."""

    def __init__(self, name: str, func: Callable):
        """
        Args:
            name: Display name for algorithm
            func: callable (A, rank) -> Decomposition
        """
        self.name = name
        self.func = func

    def run(self, A: np.ndarray, rank: int) -> BenchmarkResult:
        """
        Run benchmark for given matrix and rank.

        Failures are recorded in the result instead of aborting the sweep.
        """
        try:
            tracemalloc.start()

            start_time = time.perf_counter()
            decomposition = self.func(A.copy(), rank)
            time_sec = time.perf_counter() - start_time

            _, peak = tracemalloc.get_traced_memory()
            tracemalloc.stop()

            A_approx = reconstruct(*decomposition, rank)
            diff = A - A_approx
            m, n = A.shape

            return BenchmarkResult(
                method_name=self.name,
                rank=rank,
                time_sec=time_sec,
                error_spectral=float(np.linalg.norm(diff, ord=2)),
                error_frobenius=float(np.linalg.norm(diff, ord="fro")),
                memory_bytes=peak,
                triplets=len(decomposition),
                compression_ratio=compression_ratio(n, m, rank, is_grayscale=True),
                success=True,
            )

        except Exception as e:
            if tracemalloc.is_tracing():
                tracemalloc.stop()
            return BenchmarkResult(
                method_name=self.name,
                rank=rank,
                time_sec=0.0,
                error_spectral=np.inf,
                error_frobenius=np.inf,
                memory_bytes=0,
                success=False,
                error_message=str(e),
            )


def compute_ranks(max_rank: int, num_ranks: Optional[int] = None) -> List[int]:
    """Ranks from 1 to max_rank, every rank or ~num_ranks evenly spaced."""
    if num_ranks is None or num_ranks >= max_rank:
        return list(range(1, max_rank + 1))
    if num_ranks <= 1:
        return [max_rank]

    raw = np.linspace(1, max_rank, num_ranks)
    return sorted(set(int(round(r)) for r in raw))


class ComparisonRunner:
    """Run the power-iteration engine and the baseline across ranks."""

    def __init__(
        self,
        matrix: np.ndarray,
        max_rank: int,
        num_ranks: Optional[int] = None,
        seed: int = 42,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        matrix_description: str = "test matrix",
    ):
        """
        Args:
            matrix: (m x n) matrix to decompose
            max_rank: maximum rank to test
            num_ranks: number of ranks to test (evenly distributed from 1 to
                       max_rank); if None, tests every rank
            seed: seed for the power iteration start vectors
            max_iterations: power iteration cap per triplet
            matrix_description: description for logging
        """
        self.A = np.asarray(matrix, dtype=float)
        self.max_rank = max_rank
        self.num_ranks = num_ranks
        self.seed = seed
        self.max_iterations = max_iterations
        self.matrix_description = matrix_description
        self.results: List[BenchmarkResult] = []

        self._validate_inputs()

        self.algorithms = [
            AlgorithmBenchmark("Power SVD", self._power_svd),
            AlgorithmBenchmark("LAPACK SVD", numpy_svd_lowrank),
        ]

    def _power_svd(self, A, rank):
        return power_svd(A, rank, max_iterations=self.max_iterations, rng=self.seed)

    def run_all(self) -> List[BenchmarkResult]:
        """Run all algorithms for all ranks."""
        ranks_to_test = compute_ranks(self.max_rank, self.num_ranks)

        print(f"Running comparisons on {self.matrix_description} for {len(ranks_to_test)} ranks...")
        print(f"Testing ranks: {ranks_to_test}\n")

        for idx, rank in enumerate(ranks_to_test, 1):
            print(f"Rank {rank} ({idx}/{len(ranks_to_test)}):")

            for algo in self.algorithms:
                result = algo.run(self.A, rank)
                self.results.append(result)

                if result.success:
                    print(
                        f"  {algo.name:12s}: {result.time_sec:.4f}s, "
                        f"spectral={result.error_spectral:.4f}, "
                        f"frobenius={result.error_frobenius:.4f}, "
                        f"mem={result.memory_bytes // 1024}KB"
                    )
                else:
                    print(f"  {algo.name:12s}: FAILED - {result.error_message}")

            print()

        return self.results

    def _validate_inputs(self):
        """Validate matrix dimensions, max_rank, and num_ranks."""
        if self.A.ndim != 2:
            raise ValueError(f"Expected a 2-D matrix, got shape {self.A.shape}")

        m, n = self.A.shape

        if self.max_rank < 1:
            raise ValueError(f"Max rank must be at least 1, got {self.max_rank}")

        if self.max_rank > min(m, n):
            raise ValueError(
                f"Max rank ({self.max_rank}) must not exceed "
                f"min matrix dimension ({min(m, n)})"
            )

        if self.num_ranks is not None and self.num_ranks < 1:
            raise ValueError(
                f"Number of ranks must be at least 1, got {self.num_ranks}"
            )


def results_to_frame(results: List[BenchmarkResult]) -> pd.DataFrame:
    """Tabulate benchmark results, one row per (method, rank)."""
    return pd.DataFrame([asdict(r) for r in results])


class ResultsVisualizer:
    """Create visualization plots from benchmark results."""

    def __init__(self, results: List[BenchmarkResult], label: str = "sweep"):
        """
        Args:
            results: List of benchmark results
            label: Name of the experiment subfolder
        """
        self.results = results
        self.label = label
        self.methods = sorted(set(r.method_name for r in results if r.success))

        self.colors = {
            "Power SVD": "#d62728",
            "LAPACK SVD": "#8c564b",
        }
        self.markers = {
            "Power SVD": "X",
            "LAPACK SVD": "P",
        }

    def plot_all(self, save_dir: str = ".") -> Path:
        """Generate all plots and the CSV inside save_dir/label."""
        experiment_dir = Path(save_dir) / self.label
        experiment_dir.mkdir(parents=True, exist_ok=True)

        self._plot_metric(
            "time_sec", experiment_dir / "time_vs_rank.png",
            title="Execution Time vs Rank", ylabel="Time (seconds)", use_log_scale=True,
        )
        self._plot_metric(
            "error_spectral", experiment_dir / "error_spectral_vs_rank.png",
            title="Approximation Error (Spectral Norm) vs Rank", ylabel="Spectral Norm Error",
            use_log_scale=True,
        )
        self._plot_metric(
            "error_frobenius", experiment_dir / "error_frobenius_vs_rank.png",
            title="Approximation Error (Frobenius Norm) vs Rank", ylabel="Frobenius Norm Error",
            use_log_scale=True,
        )
        self._plot_metric(
            "memory_bytes", experiment_dir / "memory_vs_rank.png",
            title="Peak Memory Usage vs Rank", ylabel="Memory (MB)", scale=1 / (1024 * 1024),
        )
        self._plot_metric(
            "compression_ratio", experiment_dir / "ratio_vs_rank.png",
            title="Compression Ratio vs Rank", ylabel="Original / compressed size",
        )

        results_to_frame(self.results).to_csv(experiment_dir / "sweep_results.csv", index=False)

        print(f"\nPlots saved to {experiment_dir}:")
        print(f"  - time_vs_rank.png")
        print(f"  - error_spectral_vs_rank.png")
        print(f"  - error_frobenius_vs_rank.png")
        print(f"  - memory_vs_rank.png")
        print(f"  - ratio_vs_rank.png")
        print(f"  - sweep_results.csv")

        return experiment_dir

    def _plot_metric(
        self,
        field: str,
        save_path: Path,
        title: str,
        ylabel: str,
        use_log_scale: bool = False,
        scale: float = 1.0,
    ):
        fig, ax = plt.subplots(figsize=(10, 6))

        for method in self.methods:
            data = [
                (r.rank, getattr(r, field) * scale)
                for r in self.results
                if r.method_name == method and r.success
            ]
            if data:
                ranks, values = zip(*data)
                ax.plot(
                    ranks,
                    values,
                    marker=self.markers.get(method, "o"),
                    color=self.colors.get(method, "gray"),
                    linewidth=2,
                    markersize=6,
                    label=method,
                )

        self._format_plot(ax, title=title, xlabel="Rank", ylabel=ylabel, use_log_scale=use_log_scale)
        fig.savefig(save_path, dpi=150, bbox_inches="tight")
        plt.close(fig)

    def _format_plot(
        self, ax, title: str, xlabel: str, ylabel: str, use_log_scale: bool = False
    ):
        """Helper to format plot with consistent style."""
        ax.set_title(title, fontsize=14, fontweight="bold")
        ax.set_xlabel(xlabel, fontsize=12)
        ax.set_ylabel(ylabel, fontsize=12)
        ax.grid(True, alpha=0.3, linestyle="--")
        ax.legend(fontsize=10, loc="best")

        if use_log_scale:
            ax.set_yscale("log")
