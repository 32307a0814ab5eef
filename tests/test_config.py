"""Tests for GeneratorConfig."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from querybench.config import DEFAULT_END, DEFAULT_START, GeneratorConfig


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Isolate from QUERYBENCH_* variables and any local .env file."""
    import os

    for key in list(os.environ):
        if key.startswith("QUERYBENCH_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


def test_defaults() -> None:
    """Test default values."""
    config = GeneratorConfig()

    assert config.dialect == "cassandra"
    assert config.target_name == "benchmark_db"
    assert config.start == DEFAULT_START
    assert config.end == DEFAULT_END
    assert config.scale_var == 1
    assert config.query_type == "all"
    assert config.workers == 1


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test reading QUERYBENCH_* variables."""
    monkeypatch.setenv("QUERYBENCH_DIALECT", "Influx")
    monkeypatch.setenv("QUERYBENCH_SCALE_VAR", "100")
    monkeypatch.setenv("QUERYBENCH_START", "2017-03-01T00:00:00Z")
    monkeypatch.setenv("QUERYBENCH_WEIGHTS", '{"groupby": 2}')

    config = GeneratorConfig.from_env()

    assert config.dialect == "influx"
    assert config.scale_var == 100
    assert config.start == datetime(2017, 3, 1, tzinfo=timezone.utc)
    assert config.weights == {"groupby": 2}


def test_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that explicit values beat the environment and None falls through."""
    monkeypatch.setenv("QUERYBENCH_SCALE_VAR", "100")
    monkeypatch.setenv("QUERYBENCH_TARGET_NAME", "from_env")

    config = GeneratorConfig.from_env(scale_var=8, target_name=None)

    assert config.scale_var == 8
    assert config.target_name == "from_env"


def test_naive_times_become_utc() -> None:
    """Test timezone normalisation."""
    config = GeneratorConfig(start=datetime(2016, 1, 1), end=datetime(2016, 1, 2))

    assert config.start.tzinfo is not None


@pytest.mark.parametrize("field,value", [("scale_var", 0), ("total_queries", -1), ("workers", 0)])
def test_validation(field: str, value: int) -> None:
    """Test numeric bounds."""
    with pytest.raises(ValidationError):
        GeneratorConfig(**{field: value})


def test_malformed_weights_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that non-JSON weights in the environment raise ValueError."""
    monkeypatch.setenv("QUERYBENCH_WEIGHTS", "groupby=1")

    with pytest.raises(ValueError, match="QUERYBENCH_WEIGHTS"):
        GeneratorConfig.from_env()
