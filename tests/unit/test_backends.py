# tests/unit/test_backends.py
"""
Tests for the Cohere and Ollama backends.

Both are exercised against httpx.MockTransport; retry delays are zero.
"""

from __future__ import annotations

import json

import httpx
import pytest
from pydantic import ValidationError

from chainloom.chains.execution import simple_call
from chainloom.chains.llm import LLMChain
from chainloom.core.context import RunContext
from chainloom.core.exceptions import BackendError, ErrorKind, InputTypeMismatchError
from chainloom.model.credentials import CredentialError
from chainloom.model.chatmodel.ollama import Ollama
from chainloom.model.llm.cohere import Cohere, CohereConfig
from chainloom.prompt.template import PromptTemplate


class ScriptedTransport:
    """Replies with queued (status, body) pairs and records request bodies."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(json.loads(request.content))
        status, body = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        return httpx.Response(status, json=body)

    def client(self, base_url: str) -> httpx.Client:
        return httpx.Client(base_url=base_url, transport=httpx.MockTransport(self))


COHERE_OK = (200, {"generations": [{"text": " hello ", "likelihood": -1.5}]})


def make_cohere(transport: ScriptedTransport, **kwargs) -> Cohere:
    return Cohere(
        api_key="test",
        client=transport.client("https://api.cohere.ai/v1"),
        retry_delay=0,
        **kwargs,
    )


class TestCohere:
    """Tests for the Cohere text backend."""

    def test_defaults(self):
        config = CohereConfig()
        assert config.model == "command"
        assert config.num_generations == 1
        assert config.max_tokens == 256
        assert config.temperature == 0.75
        assert config.k == 0
        assert config.p == 1.0
        assert config.return_likelihoods is None
        assert config.max_retries == 3

    def test_generate(self):
        transport = ScriptedTransport(COHERE_OK)
        result = make_cohere(transport).generate(RunContext(), "Say hi", stop=["\n"])

        assert result.generations[0].text == " hello "
        assert result.llm_output["likelihood"] == -1.5
        payload = transport.requests[0]
        assert payload["prompt"] == "Say hi"
        assert payload["model"] == "command"
        assert payload["stop_sequences"] == ["\n"]
        assert "return_likelihoods" not in payload

    def test_retries_rate_limit_then_succeeds(self):
        transport = ScriptedTransport((429, {"message": "slow down"}), COHERE_OK)
        result = make_cohere(transport, max_retries=2).generate(RunContext(), "hi")

        assert result.generations[0].text == " hello "
        assert len(transport.requests) == 2

    def test_does_not_retry_authentication(self):
        transport = ScriptedTransport((401, {"message": "invalid api token"}), COHERE_OK)
        with pytest.raises(BackendError) as exc_info:
            make_cohere(transport).generate(RunContext(), "hi")

        assert exc_info.value.kind is ErrorKind.AUTHENTICATION
        assert len(transport.requests) == 1

    def test_gives_up_after_max_retries(self):
        transport = ScriptedTransport((500, {"message": "oops"}))
        with pytest.raises(BackendError) as exc_info:
            make_cohere(transport, max_retries=3).generate(RunContext(), "hi")

        assert exc_info.value.kind is ErrorKind.SERVER
        assert len(transport.requests) == 3

    def test_no_generations(self):
        transport = ScriptedTransport((200, {"generations": []}))
        with pytest.raises(BackendError):
            make_cohere(transport).generate(RunContext(), "hi")

    @pytest.mark.parametrize(
        "body",
        [
            ["oops"],
            {"generations": ["not a dict"]},
            {"generations": {"text": "not a list"}},
        ],
    )
    def test_malformed_body_is_classified(self, body):
        transport = ScriptedTransport((200, body))
        with pytest.raises(BackendError) as exc_info:
            make_cohere(transport).generate(RunContext(), "hi")
        assert exc_info.value.kind is ErrorKind.UNKNOWN
        assert len(transport.requests) == 1


    def test_in_llm_chain(self):
        transport = ScriptedTransport(COHERE_OK)
        chain = LLMChain(make_cohere(transport), PromptTemplate("Greet {name}"))

        assert simple_call(chain, "Ada") == "hello"
        assert transport.requests[0]["prompt"] == "Greet Ada"

    def test_missing_api_key(self):
        with pytest.raises(CredentialError):
            Cohere()

    def test_api_key_from_env(self, monkeypatch):
        monkeypatch.setenv("COHERE_API_KEY", "from-env")
        llm = Cohere()
        assert llm._client.headers["Authorization"] == "Bearer from-env"

    def test_invalid_option(self):
        with pytest.raises(ValidationError):
            Cohere(api_key="x", temprature=0.1)


OLLAMA_OK = (200, {"message": {"role": "assistant", "content": "hi there"}, "eval_count": 3})


def make_ollama(transport: ScriptedTransport, **kwargs) -> Ollama:
    return Ollama(client=transport.client("http://localhost:11434"), retry_delay=0, **kwargs)


class TestOllama:
    """Tests for the Ollama chat backend."""

    def test_generate(self):
        transport = ScriptedTransport(OLLAMA_OK)
        result = make_ollama(transport).generate(
            RunContext(),
            [{"role": "system", "content": "be brief"}, {"role": "human", "content": "hi"}],
            stop=["\n"],
        )

        assert result.generations[0].text == "hi there"
        assert result.llm_output == {"eval_count": 3}
        payload = transport.requests[0]
        assert payload["stream"] is False
        assert payload["model"] == "llama2"
        assert payload["messages"] == [
            {"role": "system", "content": "be brief"},
            {"role": "user", "content": "hi"},
        ]
        assert payload["options"]["num_predict"] == 256
        assert payload["options"]["stop"] == ["\n"]

    def test_unknown_role(self):
        transport = ScriptedTransport(OLLAMA_OK)
        with pytest.raises(InputTypeMismatchError):
            make_ollama(transport).generate(RunContext(), [{"role": "wizard", "content": "x"}])
        assert transport.requests == []

    def test_missing_content(self):
        transport = ScriptedTransport((200, {"done": True}))
        with pytest.raises(BackendError):
            make_ollama(transport).generate(RunContext(), [{"role": "user", "content": "x"}])

    def test_non_object_body(self):
        transport = ScriptedTransport((200, ["oops"]))
        with pytest.raises(BackendError) as exc_info:
            make_ollama(transport).generate(RunContext(), [{"role": "user", "content": "x"}])
        assert exc_info.value.kind is ErrorKind.UNKNOWN


    def test_retries_server_errors(self):
        transport = ScriptedTransport((503, {"error": "loading model"}), OLLAMA_OK)
        result = make_ollama(transport, max_retries=2).generate(
            RunContext(), [{"role": "user", "content": "x"}]
        )
        assert result.generations[0].text == "hi there"
        assert len(transport.requests) == 2

    def test_is_chat_model_in_llm_chain(self):
        transport = ScriptedTransport(OLLAMA_OK)
        chain = LLMChain(make_ollama(transport), PromptTemplate("Say hi to {name}"))

        assert simple_call(chain, "Ada") == "hi there"
        assert transport.requests[0]["messages"] == [{"role": "user", "content": "Say hi to Ada"}]
