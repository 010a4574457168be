# chainloom/chains/refine_documents.py
"""
RefineDocumentsChain - fold documents into a running answer.

    docs[0]            -> initial chain            -> answer_0
    docs[i], answer_i-1 -> refine chain (i = 1..n-1) -> answer_i

Each document is rendered with ``document_prompt`` (its page content
under ``page_content`` plus every metadata field) and bound to
``document_variable_name``. The refine chain also receives the previous
answer under ``initial_response_name``. Calls run strictly in order.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from chainloom.callbacks.base import Observer
from chainloom.chains.base import Chain, ChainCallOptions
from chainloom.chains.config import RefineDocumentsConfig
from chainloom.chains.execution import call
from chainloom.core.context import RunContext
from chainloom.core.document import Document, is_document_sequence
from chainloom.core.exceptions import (
    EmptyInputCollectionError,
    InputTypeMismatchError,
    MissingInputKeyError,
)
from chainloom.core.values import ChainValues
from chainloom.logging.logger import get_logger
from chainloom.logging.tags import CHAIN
from chainloom.memory.base import Memory
from chainloom.prompt.template import PromptTemplate

logger = get_logger(__name__)

DEFAULT_DOCUMENT_PROMPT = PromptTemplate("{page_content}")


class RefineDocumentsChain:
    """
    Refine strategy: one initial call, then one refine call per extra document.

    Args:
        llm_chain: Produces the first answer from the first document
        refine_llm_chain: Improves the running answer with each further document
    """

    def __init__(
        self,
        llm_chain: Chain,
        refine_llm_chain: Chain,
        *,
        config: Optional[RefineDocumentsConfig] = None,
        **kwargs: Any,
    ) -> None:
        self.llm_chain = llm_chain
        self.refine_llm_chain = refine_llm_chain
        self.config = config or RefineDocumentsConfig(**kwargs)
        self.document_prompt = self.config.document_prompt or DEFAULT_DOCUMENT_PROMPT

    def _render(self, doc: Document) -> str:
        info: Dict[str, Any] = {"page_content": doc.page_content}
        info.update(doc.metadata)
        return self.document_prompt.format(info)

    def _run(
        self,
        chain: Chain,
        context: RunContext,
        values: ChainValues,
        options: ChainCallOptions,
    ) -> str:
        outputs = call(chain, values, context=context, options=options.child())
        return outputs.get_string(chain.output_keys()[0])

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
        if len(docs) == 0:
            raise EmptyInputCollectionError(f"{cfg.input_key!r} has no documents to refine")

        rest = inputs.omit(cfg.input_key)

        initial = rest.copy()
        initial[cfg.document_variable_name] = self._render(docs[0])
        answer = self._run(self.llm_chain, context, initial, options)

        for index, doc in enumerate(docs[1:], start=1):
            context.raise_if_cancelled()
            refine = rest.copy()
            refine[cfg.document_variable_name] = self._render(doc)
            refine[cfg.initial_response_name] = answer
            answer = self._run(self.refine_llm_chain, context, refine, options)
            logger.debug(f"{CHAIN} refined answer with document {index + 1}/{len(docs)}")

        return ChainValues({cfg.output_key: answer.strip()})

    def input_keys(self) -> List[str]:
        cfg = self.config
        reserved = (cfg.input_key, cfg.document_variable_name, cfg.initial_response_name)
        rest: List[str] = []
        for key in [*self.llm_chain.input_keys(), *self.refine_llm_chain.input_keys()]:
            if key not in reserved and key not in rest:
                rest.append(key)
        return [cfg.input_key, *rest]

    def output_keys(self) -> List[str]:
        return [self.config.output_key]

    def memory(self) -> Optional[Memory]:
        return None

    def kind(self) -> str:
        return "RefineDocuments"

    def verbose(self) -> bool:
        return self.config.verbose

    def observers(self) -> List[Observer]:
        return list(self.config.observers)


__all__ = ["RefineDocumentsChain", "DEFAULT_DOCUMENT_PROMPT"]
