# tests/unit/test_registry.py
"""Tests for the backend registry."""

from __future__ import annotations

import pytest

from chainloom.core.exceptions import ConfigurationError
from chainloom.model import registry
from chainloom.model.chatmodel.ollama import Ollama
from chainloom.model.registry import (
    ModelConfig,
    available_models,
    get_model,
    model_from_config,
    register_model,
)

from .fakes import FakeLLM


@pytest.fixture
def restore_registry():
    saved = dict(registry._FACTORIES)
    yield
    registry._FACTORIES.clear()
    registry._FACTORIES.update(saved)


class TestRegistry:
    """Tests for provider lookup."""

    def test_builtin_providers(self):
        assert {"cohere", "ollama"} <= set(available_models())

    def test_get_model_builds_backend(self):
        model = get_model("ollama", model="llama3.2:1b")
        assert isinstance(model, Ollama)
        assert model.config.model == "llama3.2:1b"

    def test_unknown_provider(self):
        with pytest.raises(ConfigurationError, match="Available"):
            get_model("nope")

    def test_construction_failure_wrapped(self):
        with pytest.raises(ConfigurationError):
            get_model("ollama", not_an_option=True)

    def test_register_model(self, restore_registry):
        fake = FakeLLM()
        register_model("fake", lambda **kwargs: fake)

        assert "fake" in available_models()
        assert model_from_config(ModelConfig(provider="fake")) is fake
