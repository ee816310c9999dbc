"""
End-to-end tests for the command-line tools.
"""

import numpy as np
import pandas as pd
import pytest
from PIL import Image

from svd_compress import compare_lowrank_image, image_lowrank_cli, plot_sweep_errors
from svd_compress.image_lowrank_cli import parse_args, progress_printer, settings_from_args
from svd_compress.rank_selection import RankMode


@pytest.fixture
def color_png(tmp_path):
    rng = np.random.default_rng(0)
    arr = rng.integers(0, 256, size=(6, 5, 3), dtype=np.uint8)
    path = tmp_path / "noise.png"
    Image.fromarray(arr).save(path)
    return path


@pytest.fixture
def gray_png(tmp_path):
    arr = np.tile(np.arange(0, 250, 50, dtype=np.uint8), (4, 1))
    path = tmp_path / "stripes.png"
    Image.fromarray(arr).save(path)
    return path


class TestArguments:

    def test_defaults_to_count_mode(self):
        settings = settings_from_args(parse_args(["img.png"]))
        assert settings.mode is RankMode.COUNT
        assert settings.value == 50

    def test_percentage_mode(self):
        settings = settings_from_args(parse_args(["img.png", "-p", "80", "--exact-percentage"]))
        assert settings.mode is RankMode.PERCENTAGE
        assert settings.value == 80
        assert settings.exact_percentage

    def test_rank_and_percentage_exclusive(self):
        with pytest.raises(SystemExit):
            parse_args(["img.png", "-k", "3", "-p", "50"])

    def test_percentage_out_of_range(self):
        with pytest.raises(SystemExit):
            parse_args(["img.png", "-p", "0"])


class TestCompressCommand:

    def test_count_mode_writes_outputs(self, color_png, tmp_path, capsys):
        out_dir = tmp_path / "results"
        image_lowrank_cli.main([str(color_png), "-k", "2", "-o", str(out_dir), "--seed", "0"])

        png = out_dir / "noise_rank_002.png"
        csv = out_dir / "noise_rank_002_singular_values.csv"
        assert png.exists() and csv.exists()

        with Image.open(png) as img:
            assert img.size == (5, 6)

        frame = pd.read_csv(csv, index_col="index")
        assert list(frame.columns) == ["red", "green", "blue"]
        assert len(frame) == 2

        output = capsys.readouterr().out
        assert "Compression ratio" in output
        assert "MB low-rank vs" in output
        assert "Compressing blue channel" in output

    def test_rank_clipped_to_image(self, gray_png, tmp_path, capsys):
        out_dir = tmp_path / "results"
        image_lowrank_cli.main([str(gray_png), "-k", "40", "-o", str(out_dir), "--seed", "0"])

        assert (out_dir / "stripes_rank_004.png").exists()
        assert "[warning]" in capsys.readouterr().out

    def test_exact_percentage_mode(self, gray_png, tmp_path, capsys):
        out_dir = tmp_path / "results"
        image_lowrank_cli.main(
            [str(gray_png), "-p", "100", "--exact-percentage", "-o", str(out_dir), "--seed", "0"]
        )

        # the stripes image has rank one
        assert (out_dir / "stripes_rank_001.png").exists()
        assert "Computing singular value distribution" in capsys.readouterr().out


class TestProgressPrinter:

    def test_reports_percent(self, capsys):
        report = progress_printer(3)
        report("Extracting grayscale data")
        report("Compressing grayscale channel")

        lines = capsys.readouterr().out.splitlines()
        assert "40.0%" in lines[0]
        assert "60.0%" in lines[1]


class TestSweepCommands:

    def test_random_matrix_sweep(self, tmp_path, capsys):
        out_dir = tmp_path / "sweeps"
        results = compare_lowrank_image.main(
            ["--random", "8", "6", "-r", "3", "-o", str(out_dir), "--seed", "5"]
        )

        assert len(results) == 6
        assert all(r.success for r in results)
        assert (out_dir / "random_8x6" / "sweep_results.csv").exists()

    def test_sweep_sources_exclusive(self, tmp_path):
        with pytest.raises(SystemExit):
            compare_lowrank_image.main(
                ["--random", "8", "6", "--lowrank", "8", "6", "2", "-r", "2", "-o", str(tmp_path)]
            )

    def test_sweep_and_overlay_plot(self, tmp_path, capsys):
        out_dir = tmp_path / "sweeps"
        results = compare_lowrank_image.main(
            ["--lowrank", "12", "10", "3", "-r", "4", "-o", str(out_dir), "--seed", "1"]
        )

        assert len(results) == 8
        assert all(r.success for r in results)

        csv_path = out_dir / "lowrank_r3_noise0_12x10" / "sweep_results.csv"
        assert csv_path.exists()
        assert (csv_path.parent / "error_frobenius_vs_rank.png").exists()

        frame = pd.read_csv(csv_path)
        power = frame[frame["method_name"] == "Power SVD"].sort_values("rank")
        assert power["error_frobenius"].is_monotonic_decreasing

        plot_path = tmp_path / "overlay.png"
        plot_sweep_errors.main([str(csv_path), "-o", str(plot_path)])
        assert plot_path.exists()
