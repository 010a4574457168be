# chainloom/rag/conversational_retrieval.py
"""
ConversationalRetrieval - chat over documents.

Two stages, run in order:
    1. Condense: rewrite the follow-up question into a standalone one
       using the conversation history. Skipped when history is empty.
    2. Answer: RetrievalQA over the standalone question.

The chain owns its memory (a ConversationBuffer unless one is given), so
call() loads the history before stage 1 and records the exchange after
stage 2.

Usage:
    chain = ConversationalRetrieval(model, retriever, return_source_documents=True)
    call(chain, {"question": "What is chunking?"})
    call(chain, {"question": "And why does it matter?"})
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional

from chainloom.callbacks.base import Observer
from chainloom.chains.base import ChainCallOptions
from chainloom.chains.config import ConversationalRetrievalConfig
from chainloom.chains.execution import call
from chainloom.chains.llm import LLMChain
from chainloom.core.context import RunContext
from chainloom.core.values import ChainValues
from chainloom.logging.logger import get_logger
from chainloom.logging.tags import CHAIN
from chainloom.memory.base import Memory
from chainloom.memory.conversation_buffer import ConversationBuffer
from chainloom.model.base import Tokenizer
from chainloom.prompt.template import PromptTemplate
from chainloom.rag.retrieval_qa import SOURCE_DOCUMENTS_KEY, RetrievalQA, Retriever

logger = get_logger(__name__)

GENERATED_QUESTION_KEY = "generated_question"

DEFAULT_HISTORY_KEY = "history"

DEFAULT_CONDENSE_QUESTION_PROMPT = PromptTemplate(
    "Given the following conversation and a follow up question, rephrase the "
    "follow up question to be a standalone question, in its original language.\n\n"
    "Chat History:\n"
    "{history}\n"
    "Follow Up Input: {question}\n"
    "Standalone question:"
)


_ROLE_LABELS = {"user": "Human", "human": "Human", "assistant": "AI", "ai": "AI"}


def render_history(history: Any) -> str:
    """Render loaded history as text; message lists become "Role: content" lines."""
    if isinstance(history, str):
        return history
    lines = []
    for message in history:
        if isinstance(message, Mapping):
            role = str(message.get("role", ""))
            lines.append(f"{_ROLE_LABELS.get(role, role)}: {message.get('content', '')}")
        else:
            lines.append(str(message))
    return "\n".join(lines)


class ConversationalRetrieval:
    """
    Condense-then-answer retrieval chain with its own memory.

    The condense prompt receives ``history`` and ``question`` whatever the
    memory key is; message-list history is rendered as "Role: content"
    lines. The QA prompt receives ``context`` and ``question``.
    """

    def __init__(
        self,
        model: Any,
        retriever: Retriever,
        *,
        tokenizer: Optional[Tokenizer] = None,
        config: Optional[ConversationalRetrievalConfig] = None,
        **kwargs: Any,
    ) -> None:
        self.config = config or ConversationalRetrievalConfig(**kwargs)
        cfg = self.config

        self._memory = cfg.memory
        if self._memory is None:
            self._memory = ConversationBuffer(input_key=cfg.input_key, output_key=cfg.output_key)

        memory_keys = self._memory.memory_keys()
        self._history_key = memory_keys[0] if memory_keys else DEFAULT_HISTORY_KEY

        self.condense_question_chain = LLMChain(
            model,
            cfg.condense_question_prompt or DEFAULT_CONDENSE_QUESTION_PROMPT,
            verbose=cfg.verbose,
        )
        self.retrieval_qa_chain = RetrievalQA(
            model,
            retriever,
            tokenizer=tokenizer,
            prompt=cfg.retrieval_qa_prompt,
            return_source_documents=cfg.return_source_documents,
            max_token_limit=cfg.max_token_limit,
            input_key=cfg.input_key,
            verbose=cfg.verbose,
        )

    def _generate_question(
        self,
        context: RunContext,
        inputs: ChainValues,
        options: ChainCallOptions,
    ) -> str:
        question = inputs.get_string(self.config.input_key)
        history = inputs.get(self._history_key)
        if not history:
            return question

        values = inputs.copy()
        values[DEFAULT_HISTORY_KEY] = render_history(history)
        values["question"] = question
        outputs = call(
            self.condense_question_chain,
            values,
            context=context,
            options=options.child(),
        )
        generated = outputs.get_string(self.condense_question_chain.output_keys()[0])
        logger.debug(f"{CHAIN} condensed question: {generated!r}")
        return generated

    def call(
        self,
        context: RunContext,
        inputs: ChainValues,
        options: ChainCallOptions,
    ) -> ChainValues:
        generated_question = self._generate_question(context, inputs, options)

        qa_outputs = call(
            self.retrieval_qa_chain,
            {self.retrieval_qa_chain.input_keys()[0]: generated_question},
            context=context,
            options=options.child(),
        )
        answer = qa_outputs.get_string(self.retrieval_qa_chain.output_keys()[0])

        result = ChainValues({self.config.output_key: answer})
        if self.config.return_source_documents:
            result[SOURCE_DOCUMENTS_KEY] = qa_outputs[SOURCE_DOCUMENTS_KEY]
        if self.config.return_generated_question:
            result[GENERATED_QUESTION_KEY] = generated_question
        return result

    def input_keys(self) -> List[str]:
        return [self.config.input_key]

    def output_keys(self) -> List[str]:
        keys = [self.config.output_key]
        if self.config.return_source_documents:
            keys.append(SOURCE_DOCUMENTS_KEY)
        if self.config.return_generated_question:
            keys.append(GENERATED_QUESTION_KEY)
        return keys

    def memory(self) -> Optional[Memory]:
        return self._memory

    def kind(self) -> str:
        return "ConversationalRetrieval"

    def verbose(self) -> bool:
        return self.config.verbose

    def observers(self) -> List[Observer]:
        return list(self.config.observers)


__all__ = [
    "ConversationalRetrieval",
    "DEFAULT_CONDENSE_QUESTION_PROMPT",
    "GENERATED_QUESTION_KEY",
    "render_history",
]
