# tests/unit/test_cli.py
"""
Tests for the chainloom CLI.

Backends are replaced with a fake registered under the "fake" provider.
"""

from __future__ import annotations

import pytest
from typer.testing import CliRunner

from chainloom.cli.cli import app
from chainloom.model import registry
from chainloom.model.registry import register_model

from .fakes import FakeLLM

runner = CliRunner()


@pytest.fixture
def fake_llm():
    saved = dict(registry._FACTORIES)
    llm = FakeLLM(respond=lambda prompt: prompt.upper())
    register_model("fake", lambda **kwargs: llm)
    yield llm
    registry._FACTORIES.clear()
    registry._FACTORIES.update(saved)


class TestGenerate:
    """Tests for `chainloom generate`."""

    def test_generate_prints_answer(self, fake_llm):
        result = runner.invoke(app, ["generate", "hello world", "--provider", "fake"])

        assert result.exit_code == 0, result.output
        assert "HELLO WORLD" in result.output
        assert fake_llm.calls[0]["prompt"] == "hello world"

    def test_backend_closed_after_run(self, fake_llm):
        result = runner.invoke(app, ["generate", "hi", "--provider", "fake"])

        assert result.exit_code == 0, result.output
        assert fake_llm.closed

    def test_stop_sequences_forwarded(self, fake_llm):
        result = runner.invoke(
            app, ["generate", "hi", "--provider", "fake", "--stop", "END", "--stop", "STOP"]
        )

        assert result.exit_code == 0, result.output
        assert fake_llm.calls[0]["stop"] == ["END", "STOP"]

    def test_config_prompt_template(self, fake_llm, tmp_path):
        path = tmp_path / "run.yaml"
        path.write_text("model:\n  provider: fake\nprompt: 'Summarize: {text}'\n")

        result = runner.invoke(app, ["generate", "abc", "--config", str(path)])

        assert result.exit_code == 0, result.output
        assert fake_llm.calls[0]["prompt"] == "Summarize: abc"

    def test_unknown_provider_fails(self):
        result = runner.invoke(app, ["generate", "hi", "--provider", "nope"])

        assert result.exit_code == 1
        assert "Unknown model provider" in result.output

    def test_missing_config_fails(self, tmp_path):
        result = runner.invoke(app, ["generate", "hi", "--config", str(tmp_path / "none.yaml")])
        assert result.exit_code == 1


class TestBatch:
    """Tests for `chainloom batch`."""

    def test_answers_in_input_order(self, fake_llm, tmp_path):
        path = tmp_path / "inputs.txt"
        path.write_text("first\n\nsecond\nthird\n")

        result = runner.invoke(app, ["batch", str(path), "--provider", "fake", "-n", "2"])

        assert result.exit_code == 0, result.output
        out = result.output
        assert out.index("FIRST") < out.index("SECOND") < out.index("THIRD")
        assert "3 inputs processed" in out
        assert len(fake_llm.calls) == 3

    def test_backend_closed_on_failure(self, fake_llm, tmp_path):
        config = tmp_path / "run.yaml"
        config.write_text("model:\n  provider: fake\nprompt: '{a} and {b}'\n")
        path = tmp_path / "inputs.txt"
        path.write_text("first\n")

        result = runner.invoke(app, ["batch", str(path), "--config", str(config)])

        assert result.exit_code == 1
        assert fake_llm.closed
        assert fake_llm.calls == []

    def test_missing_file(self, fake_llm, tmp_path):
        result = runner.invoke(app, ["batch", str(tmp_path / "none.txt"), "--provider", "fake"])
        assert result.exit_code == 1

    def test_empty_file(self, fake_llm, tmp_path):
        path = tmp_path / "inputs.txt"
        path.write_text("\n\n")

        result = runner.invoke(app, ["batch", str(path), "--provider", "fake"])

        assert result.exit_code == 0
        assert "No inputs found" in result.output
        assert fake_llm.calls == []


class TestValidateConfig:
    """Tests for `chainloom validate-config`."""

    def test_valid(self, tmp_path):
        path = tmp_path / "run.yaml"
        path.write_text("model:\n  provider: ollama\nprompt: 'Q: {question}'\n")

        result = runner.invoke(app, ["validate-config", str(path)])

        assert result.exit_code == 0, result.output
        assert "is valid" in result.output
        assert "question" in result.output

    def test_invalid_schema(self, tmp_path):
        path = tmp_path / "run.yaml"
        path.write_text("unknown: 1\n")

        result = runner.invoke(app, ["validate-config", str(path)])
        assert result.exit_code == 1

    def test_unknown_provider(self, tmp_path):
        path = tmp_path / "run.yaml"
        path.write_text("model:\n  provider: nope\n")

        result = runner.invoke(app, ["validate-config", str(path)])

        assert result.exit_code == 1
        assert "Unknown model provider" in result.output
