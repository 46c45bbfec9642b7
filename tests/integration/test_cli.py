#!/usr/bin/env python3
"""
CLI end to end with a fake provider patched in place of the real one.
"""

import importlib.util
from pathlib import Path

import pandas as pd
import pytest

import spectre.embeddings
from spectre.core.config import get_config
from spectre.core.logger import get_logger

from conftest import FakeProvider

logger = get_logger(__name__)

CLI_PATH = Path(__file__).resolve().parents[2] / "applications" / "cli" / "main.py"


def load_cli():
    spec = importlib.util.spec_from_file_location("spectre_cli", CLI_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def cli(monkeypatch):
    module = load_cli()
    monkeypatch.setattr(
        spectre.embeddings,
        "create_provider",
        lambda model, api_key=None, timeout=60.0: FakeProvider(dimension=1536, model_name=model)
    )
    return module


class TestCLI:
    """Command-line entry point"""

    def test_1_run_writes_artifacts(self, cli, movies_csv, tmp_path, capsys):
        logger.info("TEST 1: run command")
        output_dir = tmp_path / "artifacts"
        code = cli.main([
            "run",
            "--dataset", str(movies_csv),
            "--sample-size", "10",
            "--components", "2",
            "--top-k", "3",
            "--output-dir", str(output_dir),
        ])

        assert code == 0
        rankings = pd.read_csv(output_dir / "rankings.csv")
        assert len(rankings) == 30
        assert (output_dir / "projection.csv").exists()
        assert "Explained variance" in capsys.readouterr().out

    def test_2_neighbors(self, cli, movies_csv, capsys):
        logger.info("TEST 2: neighbors command")
        code = cli.main([
            "neighbors", "5001",
            "--dataset", str(movies_csv),
            "--sample-size", "100",
            "--top-k", "2",
        ])

        assert code == 0
        out = capsys.readouterr().out
        assert "Horror 1" in out
        assert out.count("[") >= 3

    def test_3_errors_exit_non_zero(self, cli, movies_csv, capsys):
        logger.info("TEST 3: invalid component count")
        code = cli.main([
            "run",
            "--dataset", str(movies_csv),
            "--sample-size", "5",
            "--components", "6",
        ])
        assert code == 1
        assert "Error" in capsys.readouterr().out

    def test_4_missing_api_key(self, movies_csv, monkeypatch, capsys):
        module = load_cli()
        monkeypatch.setattr(get_config(), "OPENAI_API_KEY", None)

        code = module.main([
            "run",
            "--dataset", str(movies_csv),
            "--model", "text-embedding-ada-002",
        ])
        assert code == 1

    def test_5_no_command_prints_help(self, cli, capsys):
        assert cli.main([]) == 0
        assert "usage" in capsys.readouterr().out.lower()

    def test_6_unknown_model_adopts_vector_width(self, cli, movies_csv, tmp_path, monkeypatch):
        logger.info("TEST 6: unknown local model")
        monkeypatch.setattr(
            spectre.embeddings,
            "create_provider",
            lambda model, api_key=None, timeout=60.0: FakeProvider(dimension=384, model_name=model)
        )
        output_dir = tmp_path / "local"
        code = cli.main([
            "run",
            "--dataset", str(movies_csv),
            "--model", "intfloat/multilingual-e5-small",
            "--sample-size", "8",
            "--output-dir", str(output_dir),
        ])

        assert code == 0
        assert len(pd.read_csv(output_dir / "projection.csv")) == 8

    def test_7_missing_local_backend_exits_non_zero(self, cli, movies_csv, monkeypatch, capsys):
        logger.info("TEST 7: sentence-transformers not installed")

        def unavailable(model, api_key=None, timeout=60.0):
            raise ImportError("sentence-transformers is required for local models")

        monkeypatch.setattr(spectre.embeddings, "create_provider", unavailable)
        code = cli.main([
            "run",
            "--dataset", str(movies_csv),
            "--model", "all-MiniLM-L6-v2",
        ])

        assert code == 1
        assert "sentence-transformers" in capsys.readouterr().out
