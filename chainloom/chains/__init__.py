# chainloom/chains/__init__.py
"""
Chains and the entrypoints that run them.

Public API:
    - Chain: Unit-of-work protocol
    - call / simple_call / batch_call: Execution entrypoints
    - LLMChain, StuffDocumentsChain, RefineDocumentsChain: Built-in chains
"""

from .base import CallOptions, Chain, ChainCallOptions
from .config import (
    ConversationalRetrievalConfig,
    LLMChainConfig,
    RefineDocumentsConfig,
    RetrievalQAConfig,
    RunConfig,
    StuffDocumentsConfig,
)
from .execution import batch_call, call, simple_call
from .llm import LLMChain
from .refine_documents import RefineDocumentsChain
from .stuff_documents import StuffDocumentsChain

__all__ = [
    "Chain",
    "CallOptions",
    "ChainCallOptions",
    "call",
    "simple_call",
    "batch_call",
    "LLMChain",
    "StuffDocumentsChain",
    "RefineDocumentsChain",
    "LLMChainConfig",
    "StuffDocumentsConfig",
    "RefineDocumentsConfig",
    "RetrievalQAConfig",
    "ConversationalRetrievalConfig",
    "RunConfig",
]
