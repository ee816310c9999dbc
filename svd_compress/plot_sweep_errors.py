import argparse
from pathlib import Path
from typing import Dict

import matplotlib.pyplot as plt
import pandas as pd


def load_results(csv_path: Path) -> pd.DataFrame:
    """Load a sweep_results.csv file, keeping successful runs only."""
    df = pd.read_csv(csv_path)
    return df[df["success"]]


def plot_sweeps(data_by_label: Dict[str, pd.DataFrame], save_path: Path) -> Path:
    """Frobenius error, spectral error and compression ratio vs rank."""
    fig, axes = plt.subplots(1, 3, figsize=(16, 5), sharex=True)

    metrics = [
        ("error_frobenius", "Frobenius error"),
        ("error_spectral", "Spectral error"),
        ("compression_ratio", "Compression ratio"),
    ]
    linestyles = {"Power SVD": "-", "LAPACK SVD": "--"}

    for ax, (col_name, y_label) in zip(axes, metrics):
        for label, df in data_by_label.items():
            for method in df["method_name"].unique():
                sub = df[df["method_name"] == method].sort_values("rank")
                ax.plot(
                    sub["rank"],
                    sub[col_name],
                    marker="o",
                    linestyle=linestyles.get(method, "-"),
                    label=f"{label} - {method}",
                )

        ax.set_xlabel("Rank")
        ax.set_ylabel(y_label)
        ax.grid(True, linestyle=":", alpha=0.5)

    axes[0].legend(title="Sweep - Method", fontsize=8)
    fig.suptitle("Approximation Error and Storage vs Rank", fontsize=12)
    fig.tight_layout()

    save_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(save_path, dpi=300, bbox_inches="tight")
    plt.close(fig)
    return save_path


def main(argv=None):
    parser = argparse.ArgumentParser(description="Overlay rank sweeps written by svd-sweep.")
    parser.add_argument("csv_paths", nargs="+", type=Path, help="sweep_results.csv files")
    parser.add_argument(
        "--output", "-o",
        type=Path,
        default=Path("results") / "error_plots.png",
        help="Output image (default: results/error_plots.png)",
    )
    args = parser.parse_args(argv)

    # label each sweep by its experiment folder
    data_by_label = {path.parent.name: load_results(path) for path in args.csv_paths}

    saved = plot_sweeps(data_by_label, args.output)
    print(f"Saved {saved}")


if __name__ == "__main__":
    main()
