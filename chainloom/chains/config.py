# chainloom/chains/config.py
"""
Option records for the built-in chains.

Each chain takes one of these at construction (or keyword overrides that
build one). Unknown options are rejected. Verbosity defaults to False here
and nowhere else; composite chains pass their own value down to the inner
chains they construct.
"""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from chainloom.model.registry import ModelConfig


class _ChainConfig(BaseModel):
    verbose: bool = Field(default=False, description="Print this chain's own runs to the console")
    observers: List[Any] = Field(default_factory=list, description="Observers local to this chain")

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)


class LLMChainConfig(_ChainConfig):
    """
    Options for LLMChain.

    | option     | default | effect                                  |
    |------------|---------|-----------------------------------------|
    | output_key | "text"  | key the trimmed generation is stored at |
    | memory     | None    | memory loaded/saved around each call    |
    | verbose    | False   | console observer for this chain's runs  |
    | observers  | []      | observers for this chain's runs only    |
    """

    output_key: str = Field(default="text")
    memory: Optional[Any] = Field(default=None)


class StuffDocumentsConfig(_ChainConfig):
    """
    Options for StuffDocumentsChain.

    | option                 | default           | effect                                   |
    |------------------------|-------------------|------------------------------------------|
    | input_key              | "input_documents" | key holding the document sequence        |
    | document_variable_name | "context"         | inner-chain variable for the joined text |
    | separator              | "\\n\\n"          | text placed between page contents        |
    """

    input_key: str = Field(default="input_documents")
    document_variable_name: str = Field(default="context")
    separator: str = Field(default="\n\n")


class RefineDocumentsConfig(_ChainConfig):
    """
    Options for RefineDocumentsChain.

    | option                 | default           | effect                                        |
    |------------------------|-------------------|-----------------------------------------------|
    | input_key              | "input_documents" | key holding the document sequence             |
    | document_variable_name | "context"         | inner-chain variable for the rendered doc     |
    | initial_response_name  | "existing_answer" | refine-chain variable for the running answer  |
    | document_prompt        | "{page_content}"  | renders one document (content + metadata)     |
    | output_key             | "text"            | key the final answer is stored at             |
    """

    input_key: str = Field(default="input_documents")
    document_variable_name: str = Field(default="context")
    initial_response_name: str = Field(default="existing_answer")
    document_prompt: Optional[Any] = Field(default=None)
    output_key: str = Field(default="text")


class RetrievalQAConfig(_ChainConfig):
    """
    Options for RetrievalQA.

    | option                  | default    | effect                                           |
    |-------------------------|------------|--------------------------------------------------|
    | input_key               | "question" | key holding the query                            |
    | output_key              | "answer"   | key the answer is stored at                      |
    | prompt                  | None       | QA prompt over {context} and {question}          |
    | return_source_documents | False      | also return the documents as source_documents    |
    | max_token_limit         | None       | drop trailing documents beyond this token budget |
    """

    input_key: str = Field(default="question")
    output_key: str = Field(default="answer")
    prompt: Optional[Any] = Field(default=None)
    return_source_documents: bool = Field(default=False)
    max_token_limit: Optional[int] = Field(default=None, ge=1)


class ConversationalRetrievalConfig(_ChainConfig):
    """
    Options for ConversationalRetrieval.

    | option                    | default    | effect                                              |
    |---------------------------|------------|-----------------------------------------------------|
    | input_key                 | "question" | key holding the user question                       |
    | output_key                | "answer"   | key the answer is stored at                         |
    | condense_question_prompt  | None       | rewrite prompt over {history} and {question}        |
    | retrieval_qa_prompt       | None       | QA prompt over {context} and {question}             |
    | memory                    | None       | defaults to a ConversationBuffer for these keys     |
    | return_source_documents   | False      | also return source_documents                        |
    | return_generated_question | False      | also return generated_question                      |
    | max_token_limit           | None       | token budget for retrieved documents                |
    """

    input_key: str = Field(default="question")
    output_key: str = Field(default="answer")
    condense_question_prompt: Optional[Any] = Field(default=None)
    retrieval_qa_prompt: Optional[Any] = Field(default=None)
    memory: Optional[Any] = Field(default=None)
    return_source_documents: bool = Field(default=False)
    return_generated_question: bool = Field(default=False)
    max_token_limit: Optional[int] = Field(default=None, ge=1)


class RunConfig(BaseModel):
    """
    Top-level YAML config used by the CLI.

    Example:
        model:
          provider: cohere
          kwargs:
            temperature: 0.2
        stop: ["\\n\\n"]
        verbose: false
    """

    model: ModelConfig = Field(default_factory=lambda: ModelConfig(provider="cohere"))
    prompt: str = Field(default="{input}", description="Template wrapped around each input")
    stop: Optional[List[str]] = Field(default=None)
    verbose: bool = Field(default=False)
    max_concurrency: Optional[int] = Field(default=None, ge=1)

    model_config = ConfigDict(extra="forbid")


__all__ = [
    "LLMChainConfig",
    "StuffDocumentsConfig",
    "RefineDocumentsConfig",
    "RetrievalQAConfig",
    "ConversationalRetrievalConfig",
    "RunConfig",
]
