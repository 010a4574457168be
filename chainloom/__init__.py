"""
chainloom - execution and orchestration engine for composable LLM chains.

A chain consumes a mapping of named inputs and produces a mapping of named
outputs. Chains compose into trees; every invocation is tracked with its
own run id linked to its parent, optional memory is loaded before and
saved after a successful run, and batches fan out concurrently with
first-error cancellation.

Quick Start:
    >>> from chainloom import LLMChain, PromptTemplate, simple_call
    >>> from chainloom.model.llm import Cohere
    >>> chain = LLMChain(Cohere(), PromptTemplate("Write a haiku about {topic}"))
    >>> print(simple_call(chain, "rain"))

Public API:
    Execution:
        - call / simple_call / batch_call
        - CallOptions, RunContext

    Chains:
        - LLMChain, StuffDocumentsChain, RefineDocumentsChain
        - RetrievalQA, ConversationalRetrieval

    Collaborators:
        - PromptTemplate, ConversationBuffer, Document
        - Observer, ConsoleObserver, LoggingObserver

Architecture:
    chainloom/
    ├── core/        # values, documents, context, retry, http, errors
    ├── callbacks/   # run tracking + observers
    ├── chains/      # chain contract, entrypoints, built-in chains
    ├── rag/         # retrieval chains
    ├── memory/      # conversational memory
    ├── model/       # backend contracts + Cohere / Ollama
    └── cli/         # typer application
"""

__version__ = "0.1.0"

# =============================================================================
# CORE TYPES
# =============================================================================

from chainloom.core import (
    BackendError,
    ChainCancelledError,
    ChainError,
    ChainloomError,
    ChainValues,
    ConfigurationError,
    Document,
    EmptyInputCollectionError,
    ErrorKind,
    InputTypeMismatchError,
    MissingInputKeyError,
    MissingOutputKeyError,
    MultipleInputsError,
    MultipleOutputsError,
    ObserverError,
    RetryPolicy,
    RunContext,
    RunStateError,
    TypeMismatchError,
    WrongOutputTypeError,
)

# =============================================================================
# RUN TRACKING
# =============================================================================

from chainloom.callbacks import (
    BaseObserver,
    CallbackManager,
    ConsoleObserver,
    LoggingObserver,
    Observer,
    RunManager,
)

# =============================================================================
# CHAINS
# =============================================================================

from chainloom.chains import (
    CallOptions,
    Chain,
    ChainCallOptions,
    LLMChain,
    RefineDocumentsChain,
    StuffDocumentsChain,
    batch_call,
    call,
    simple_call,
)
from chainloom.memory import ConversationBuffer, Memory
from chainloom.prompt import PromptTemplate
from chainloom.rag import ConversationalRetrieval, RetrievalQA

__all__ = [
    "__version__",
    # Execution
    "call",
    "simple_call",
    "batch_call",
    "CallOptions",
    "ChainCallOptions",
    "RunContext",
    # Chains
    "Chain",
    "LLMChain",
    "StuffDocumentsChain",
    "RefineDocumentsChain",
    "RetrievalQA",
    "ConversationalRetrieval",
    # Collaborators
    "ChainValues",
    "Document",
    "PromptTemplate",
    "Memory",
    "ConversationBuffer",
    "RetryPolicy",
    # Run tracking
    "Observer",
    "BaseObserver",
    "ConsoleObserver",
    "LoggingObserver",
    "CallbackManager",
    "RunManager",
    # Exceptions
    "ChainloomError",
    "ChainError",
    "MissingInputKeyError",
    "InputTypeMismatchError",
    "TypeMismatchError",
    "EmptyInputCollectionError",
    "MissingOutputKeyError",
    "MultipleInputsError",
    "MultipleOutputsError",
    "WrongOutputTypeError",
    "ObserverError",
    "RunStateError",
    "ChainCancelledError",
    "ErrorKind",
    "BackendError",
    "ConfigurationError",
]
