# tests/unit/test_conversational_retrieval.py
"""
Tests for ConversationalRetrieval.

Tests cover:
1. Question condensing - skipped on empty history, used otherwise
2. Memory - default buffer records each exchange
3. Optional outputs - source_documents / generated_question
4. History rendering - custom memory keys and message lists
"""

from __future__ import annotations

from chainloom.chains.execution import call
from chainloom.core.document import Document
from chainloom.memory.conversation_buffer import ConversationBuffer
from chainloom.rag.conversational_retrieval import ConversationalRetrieval, render_history

from .fakes import FakeLLM, FakeMemory, FakeRetriever

DOCS = [Document("chunking splits text"), Document("overlap keeps context")]


def scripted_llm() -> FakeLLM:
    def respond(prompt: str) -> str:
        if prompt.endswith("Standalone question:"):
            return "What is chunk overlap?"
        return "It keeps context between chunks."

    return FakeLLM(respond=respond)


class TestConversationalRetrieval:
    """Tests for the condense-then-answer pipeline."""

    def test_empty_history_uses_raw_question(self):
        llm = scripted_llm()
        retriever = FakeRetriever(DOCS)
        chain = ConversationalRetrieval(llm, retriever, return_generated_question=True)

        outputs = call(chain, {"question": "What is chunking?"})

        assert outputs["generated_question"] == "What is chunking?"
        assert retriever.queries == ["What is chunking?"]
        assert len(llm.calls) == 1

    def test_history_triggers_condensing(self):
        llm = scripted_llm()
        retriever = FakeRetriever(DOCS)
        chain = ConversationalRetrieval(llm, retriever, return_generated_question=True)

        call(chain, {"question": "What is chunking?"})
        outputs = call(chain, {"question": "And overlap?"})

        condense_prompt = llm.calls[1]["prompt"]
        assert "Human: What is chunking?" in condense_prompt
        assert "AI: It keeps context between chunks." in condense_prompt
        assert "Follow Up Input: And overlap?" in condense_prompt
        assert outputs["generated_question"] == "What is chunk overlap?"
        assert retriever.queries[-1] == "What is chunk overlap?"

    def test_default_memory_records_original_question(self):
        chain = ConversationalRetrieval(scripted_llm(), FakeRetriever(DOCS))
        call(chain, {"question": "What is chunking?"})

        memory = chain.memory()
        assert isinstance(memory, ConversationBuffer)
        assert [m.content for m in memory.messages] == [
            "What is chunking?",
            "It keeps context between chunks.",
        ]

    def test_custom_memory(self):
        memory = FakeMemory({"history": ""})
        chain = ConversationalRetrieval(scripted_llm(), FakeRetriever(DOCS), memory=memory)
        call(chain, {"question": "q"})

        assert chain.memory() is memory
        assert memory.saved == [({"question": "q"}, {"answer": "It keeps context between chunks."})]

    def test_output_keys(self):
        plain = ConversationalRetrieval(scripted_llm(), FakeRetriever(DOCS))
        full = ConversationalRetrieval(
            scripted_llm(),
            FakeRetriever(DOCS),
            return_source_documents=True,
            return_generated_question=True,
        )

        assert plain.output_keys() == ["answer"]
        assert full.output_keys() == ["answer", "source_documents", "generated_question"]
        assert plain.input_keys() == ["question"]

    def test_source_documents_returned(self):
        chain = ConversationalRetrieval(scripted_llm(), FakeRetriever(DOCS), return_source_documents=True)
        outputs = call(chain, {"question": "q"})

        assert outputs["answer"] == "It keeps context between chunks."
        assert outputs["source_documents"] == DOCS

    def test_verbose_passed_to_inner_chains(self):
        chain = ConversationalRetrieval(scripted_llm(), FakeRetriever(DOCS), verbose=True)

        assert chain.verbose()
        assert chain.condense_question_chain.verbose()
        assert chain.retrieval_qa_chain.verbose()

    def test_custom_memory_key_second_turn(self):
        llm = scripted_llm()
        memory = ConversationBuffer(memory_key="chat_history", input_key="question", output_key="answer")
        chain = ConversationalRetrieval(llm, FakeRetriever(DOCS), memory=memory, return_generated_question=True)

        call(chain, {"question": "What is chunking?"})
        outputs = call(chain, {"question": "And overlap?"})

        assert "Human: What is chunking?" in llm.calls[1]["prompt"]
        assert outputs["generated_question"] == "What is chunk overlap?"

    def test_message_history_rendered_as_lines(self):
        llm = scripted_llm()
        memory = ConversationBuffer(input_key="question", output_key="answer", return_messages=True)
        chain = ConversationalRetrieval(llm, FakeRetriever(DOCS), memory=memory)

        call(chain, {"question": "What is chunking?"})
        call(chain, {"question": "And overlap?"})

        condense_prompt = llm.calls[1]["prompt"]
        assert "Human: What is chunking?\nAI: It keeps context between chunks." in condense_prompt
        assert "'role'" not in condense_prompt


class TestRenderHistory:
    """Tests for history rendering ahead of condensing."""

    def test_text_unchanged(self):
        assert render_history("Human: hi\nAI: hello") == "Human: hi\nAI: hello"

    def test_messages_to_lines(self):
        history = [
            {"role": "user", "content": "hi"},
            {"role": "assistant", "content": "hello"},
            {"role": "system", "content": "be brief"},
        ]
        assert render_history(history) == "Human: hi\nAI: hello\nsystem: be brief"
