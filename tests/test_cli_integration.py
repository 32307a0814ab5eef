"""Integration tests for CLI commands."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from querybench.cli import main as cli


@pytest.fixture
def runner() -> CliRunner:
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep QUERYBENCH_* variables from leaking into CLI runs."""
    import os

    for key in list(os.environ):
        if key.startswith("QUERYBENCH_"):
            monkeypatch.delenv(key)


def test_generate_json(runner: CliRunner, tmp_path: Path) -> None:
    """Test JSONL output for Cassandra."""
    output = tmp_path / "queries.jsonl"
    result = runner.invoke(
        cli,
        ["generate", "-d", "cassandra", "-s", "8", "-n", "20", "--seed", "1", "-o", str(output)],
    )

    assert result.exit_code == 0, result.output
    lines = output.read_text().splitlines()
    assert len(lines) == 20
    records = [json.loads(line) for line in lines]
    assert all(r["dialect"] == "cassandra" for r in records)
    assert all(r["keyspace"] == "benchmark_db" for r in records)


def test_generate_text_influx(runner: CliRunner, tmp_path: Path) -> None:
    """Test rendered InfluxQL output for a single query type."""
    output = tmp_path / "queries.txt"
    result = runner.invoke(
        cli,
        [
            "generate",
            "--dialect",
            "influx",
            "--scale-var",
            "16",
            "--queries",
            "5",
            "--query-type",
            "8-host-1-hr",
            "--format",
            "text",
            "--output",
            str(output),
        ],
    )

    assert result.exit_code == 0, result.output
    lines = output.read_text().splitlines()
    assert len(lines) == 5
    assert all(line.startswith("SELECT max(usage_user) from cpu where (") for line in lines)
    assert all(line.count("hostname = ") == 8 for line in lines)


def test_generate_weights_and_workers(runner: CliRunner, tmp_path: Path) -> None:
    """Test weighted, multi-threaded generation."""
    output = tmp_path / "queries.jsonl"
    result = runner.invoke(
        cli,
        [
            "generate",
            "-s",
            "4",
            "-n",
            "30",
            "-w",
            "3",
            "--weights",
            "1-host-1-hr=2,groupby=1",
            "-o",
            str(output),
        ],
    )

    assert result.exit_code == 0, result.output
    records = [json.loads(line) for line in output.read_text().splitlines()]
    assert sum(1 for r in records if r["aggregation_type"] == "avg") == 10
    assert sum(1 for r in records if r["aggregation_type"] == "max") == 20


def test_generate_bad_time_range(runner: CliRunner, tmp_path: Path) -> None:
    """Test that a reversed range exits with an error."""
    result = runner.invoke(
        cli,
        [
            "generate",
            "--start",
            "2016-01-02T00:00:00Z",
            "--end",
            "2016-01-01T00:00:00Z",
            "-o",
            str(tmp_path / "q.jsonl"),
        ],
    )

    assert result.exit_code == 1


def test_generate_window_too_large(runner: CliRunner, tmp_path: Path) -> None:
    """Test that a day-long shape on a short range exits with an error."""
    result = runner.invoke(
        cli,
        [
            "generate",
            "--start",
            "2016-01-01T00:00:00Z",
            "--end",
            "2016-01-01T02:00:00Z",
            "-q",
            "groupby",
            "-s",
            "8",
            "-o",
            str(tmp_path / "q.jsonl"),
        ],
    )

    assert result.exit_code == 1


def test_generate_bad_weights(runner: CliRunner) -> None:
    """Test weight parsing errors."""
    result = runner.invoke(cli, ["generate", "--weights", "groupby"])

    assert result.exit_code != 0


def test_generate_malformed_weights_env(runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that bad QUERYBENCH_WEIGHTS exits cleanly with status 1."""
    monkeypatch.setenv("QUERYBENCH_WEIGHTS", "groupby=1")

    result = runner.invoke(cli, ["generate", "-n", "1"])

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)


def test_generate_invalid_scale(runner: CliRunner) -> None:
    """Test config validation errors."""
    result = runner.invoke(cli, ["generate", "-s", "0"])

    assert result.exit_code == 1


def test_catalog(runner: CliRunner) -> None:
    """Test listing a dialect's catalog."""
    result = runner.invoke(cli, ["catalog", "-d", "influx"])

    assert result.exit_code == 0, result.output


def test_version(runner: CliRunner) -> None:
    """Test the version flag."""
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert "0.1.0" in result.output
