# chainloom/chains/stuff_documents.py
"""
StuffDocumentsChain - join every document into one prompt variable.

The page contents are joined with ``separator`` and bound to
``document_variable_name``; everything else in the inputs is passed
through to the inner chain unchanged.
"""

from __future__ import annotations

from typing import Any, List, Optional

from chainloom.callbacks.base import Observer
from chainloom.chains.base import Chain, ChainCallOptions
from chainloom.chains.config import StuffDocumentsConfig
from chainloom.chains.execution import call
from chainloom.core.context import RunContext
from chainloom.core.document import is_document_sequence
from chainloom.core.exceptions import InputTypeMismatchError, MissingInputKeyError
from chainloom.core.values import ChainValues
from chainloom.memory.base import Memory


class StuffDocumentsChain:
    """
    Stuff strategy: one inner call over all documents.

    Example:
        qa = LLMChain(model, PromptTemplate("{context}\\n\\nQ: {question}"))
        chain = StuffDocumentsChain(qa)
        call(chain, {"input_documents": docs, "question": "..."})
    """

    def __init__(
        self,
        llm_chain: Chain,
        *,
        config: Optional[StuffDocumentsConfig] = None,
        **kwargs: Any,
    ) -> None:
        self.llm_chain = llm_chain
        self.config = config or StuffDocumentsConfig(**kwargs)

    def call(
        self,
        context: RunContext,
        inputs: ChainValues,
        options: ChainCallOptions,
    ) -> ChainValues:
        cfg = self.config
        if cfg.input_key not in inputs:
            raise MissingInputKeyError(cfg.input_key, chain=self.kind())

        docs = inputs[cfg.input_key]
        if not is_document_sequence(docs):
            raise InputTypeMismatchError(
                f"{cfg.input_key!r} must be a sequence of Document, got {type(docs).__name__}"
            )

        values = inputs.omit(cfg.input_key)
        values[cfg.document_variable_name] = cfg.separator.join(doc.page_content for doc in docs)

        return call(self.llm_chain, values, context=context, options=options.child())

    def input_keys(self) -> List[str]:
        rest = [
            key
            for key in self.llm_chain.input_keys()
            if key not in (self.config.input_key, self.config.document_variable_name)
        ]
        return [self.config.input_key, *rest]

    def output_keys(self) -> List[str]:
        return self.llm_chain.output_keys()

    def memory(self) -> Optional[Memory]:
        return None

    def kind(self) -> str:
        return "StuffDocuments"

    def verbose(self) -> bool:
        return self.config.verbose

    def observers(self) -> List[Observer]:
        return list(self.config.observers)


__all__ = ["StuffDocumentsChain"]
