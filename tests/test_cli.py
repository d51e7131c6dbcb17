"""End-to-end tests for the command-line entry point."""

import logging

import pandas as pd

from pcreff.cli import main
from helpers import GOOD_CT, QUANTITIES


def _write_long_csv(path, quantities=QUANTITIES, ct=GOOD_CT):
    rows = [
        {"quantity": q, "replicate": r + 1, "ct": ct[r][j]}
        for j, q in enumerate(quantities)
        for r in range(len(ct))
    ]
    pd.DataFrame(rows).to_csv(path, index=False)


def test_cli_writes_outputs(tmp_path, capsys):
    input_csv = tmp_path / "calibration.csv"
    outdir = tmp_path / "results"
    _write_long_csv(input_csv)

    code = main(["--input", str(input_csv), "--outdir", str(outdir), "--plot"])

    assert code == 0
    for name in (
        "efficiency_summary.csv",
        "regression_summary.csv",
        "calibration_data.csv",
        "calibration_curve.png",
    ):
        assert (outdir / name).exists(), f"Missing output: {name}"
    out = capsys.readouterr().out
    assert "PCR Efficiency" in out
    assert "This is a good calibrator" in out


def test_cli_quiet_prints_only_report(tmp_path, capsys):
    input_csv = tmp_path / "calibration.csv"
    _write_long_csv(input_csv)

    assert main(["--input", str(input_csv), "--quiet"]) == 0
    out = capsys.readouterr().out
    assert "PCR Efficiency" in out
    assert "Calibration curve regression" not in out


def test_cli_wide_format(tmp_path, capsys):
    input_csv = tmp_path / "wide.csv"
    pd.DataFrame(GOOD_CT, columns=[str(q) for q in QUANTITIES]).to_csv(input_csv, index=False)

    assert main(["--input", str(input_csv), "--format", "wide", "--quiet"]) == 0
    assert "This is a good calibrator" in capsys.readouterr().out


def test_cli_invalid_input_returns_error(tmp_path, caplog):
    caplog.set_level(logging.ERROR)
    input_csv = tmp_path / "bad.csv"
    _write_long_csv(input_csv, quantities=[0.0, 0.5, 3, 15, 30])

    assert main(["--input", str(input_csv), "--quiet"]) == 1
    assert any("strictly positive" in rec.getMessage() for rec in caplog.records)
