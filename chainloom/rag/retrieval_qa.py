# chainloom/rag/retrieval_qa.py
"""
RetrievalQA - retrieve documents for a question, then answer over them.

Flow:
    question -> Retriever -> [max_token_limit trim] -> StuffDocumentsChain -> answer

The stuff chain wraps an LLMChain over the QA prompt, which must use the
``{context}`` and ``{question}`` variables.
"""

from __future__ import annotations

from typing import Any, List, Optional, Protocol

from chainloom.callbacks.base import Observer
from chainloom.chains.base import ChainCallOptions
from chainloom.chains.config import RetrievalQAConfig
from chainloom.chains.execution import call
from chainloom.chains.llm import LLMChain
from chainloom.chains.stuff_documents import StuffDocumentsChain
from chainloom.core.context import RunContext
from chainloom.core.document import Document
from chainloom.core.exceptions import ConfigurationError
from chainloom.core.values import ChainValues
from chainloom.logging.logger import get_logger
from chainloom.logging.tags import RETRIEVER
from chainloom.memory.base import Memory
from chainloom.model.base import Tokenizer
from chainloom.prompt.template import PromptTemplate

logger = get_logger(__name__)

SOURCE_DOCUMENTS_KEY = "source_documents"

DEFAULT_QA_PROMPT = PromptTemplate(
    "Use the following pieces of context to answer the question at the end. "
    "If you don't know the answer, just say that you don't know, "
    "don't try to make up an answer.\n\n"
    "{context}\n\n"
    "Question: {question}\n"
    "Helpful Answer:"
)


class Retriever(Protocol):
    """Document lookup collaborator. Don't check isinstance - just call it."""

    def get_relevant_documents(self, context: RunContext, query: str) -> List[Document]: ...


def reduce_tokens_below_limit(
    docs: List[Document], tokenizer: Tokenizer, max_token_limit: int
) -> List[Document]:
    """Drop trailing documents until the total token count fits the limit."""
    counts = [tokenizer.get_num_tokens(doc.page_content) for doc in docs]
    keep = len(docs)
    total = sum(counts)
    while keep > 0 and total > max_token_limit:
        keep -= 1
        total -= counts[keep]
    return docs[:keep]


class RetrievalQA:
    """
    Question answering over retrieved documents.

    Args:
        model: Generation backend for the answer
        retriever: Anything with get_relevant_documents(context, query)
        tokenizer: Token counter, required with max_token_limit (defaults
            to the model when it can count tokens)
    """

    def __init__(
        self,
        model: Any,
        retriever: Retriever,
        *,
        tokenizer: Optional[Tokenizer] = None,
        config: Optional[RetrievalQAConfig] = None,
        **kwargs: Any,
    ) -> None:
        self.config = config or RetrievalQAConfig(**kwargs)
        self.retriever = retriever

        if tokenizer is None and hasattr(model, "get_num_tokens"):
            tokenizer = model
        if self.config.max_token_limit is not None and tokenizer is None:
            raise ConfigurationError("max_token_limit needs a tokenizer that can count tokens")
        self.tokenizer = tokenizer

        llm_chain = LLMChain(
            model,
            self.config.prompt or DEFAULT_QA_PROMPT,
            verbose=self.config.verbose,
        )
        self.combine_chain = StuffDocumentsChain(llm_chain, verbose=self.config.verbose)

    def _get_documents(self, context: RunContext, question: str) -> List[Document]:
        context.raise_if_cancelled()
        docs = list(self.retriever.get_relevant_documents(context, question))
        logger.debug(f"{RETRIEVER} retrieved {len(docs)} documents")

        if self.config.max_token_limit is not None:
            kept = reduce_tokens_below_limit(docs, self.tokenizer, self.config.max_token_limit)
            if len(kept) < len(docs):
                logger.debug(
                    f"{RETRIEVER} dropped {len(docs) - len(kept)} documents over "
                    f"{self.config.max_token_limit} tokens"
                )
            docs = kept
        return docs

    def call(
        self,
        context: RunContext,
        inputs: ChainValues,
        options: ChainCallOptions,
    ) -> ChainValues:
        question = inputs.get_string(self.config.input_key)
        docs = self._get_documents(context, question)

        combine_input_key = self.combine_chain.config.input_key
        outputs = call(
            self.combine_chain,
            {combine_input_key: docs, "question": question},
            context=context,
            options=options.child(),
        )
        answer = outputs.get_string(self.combine_chain.output_keys()[0])

        result = ChainValues({self.config.output_key: answer})
        if self.config.return_source_documents:
            result[SOURCE_DOCUMENTS_KEY] = docs
        return result

    def input_keys(self) -> List[str]:
        return [self.config.input_key]

    def output_keys(self) -> List[str]:
        keys = [self.config.output_key]
        if self.config.return_source_documents:
            keys.append(SOURCE_DOCUMENTS_KEY)
        return keys

    def memory(self) -> Optional[Memory]:
        return None

    def kind(self) -> str:
        return "RetrievalQA"

    def verbose(self) -> bool:
        return self.config.verbose

    def observers(self) -> List[Observer]:
        return list(self.config.observers)


__all__ = [
    "RetrievalQA",
    "Retriever",
    "reduce_tokens_below_limit",
    "DEFAULT_QA_PROMPT",
    "SOURCE_DOCUMENTS_KEY",
]
