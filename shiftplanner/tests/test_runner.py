"""Tests for the command-line runner."""

from shiftplanner.runner import main


def test_runner_sample_month(tmp_path, capsys):
    export = tmp_path / "schedule.csv"

    code = main([
        "--starting-balance", "90.5",
        "--target", "490.5",
        "--population", "20",
        "--generations", "5",
        "--seed", "1",
        "--quiet",
        "--export", str(export),
    ])

    assert code == 0
    output = capsys.readouterr().out
    assert "SHIFT PLAN" in output
    assert "Final balance:" in output
    assert export.read_text().startswith("Day,Shifts")


def test_runner_reports_bad_input(capsys):
    code = main(["--starting-balance", "0", "--target", "0", "--population", "2"])

    assert code == 1
    assert "Error:" in capsys.readouterr().err
