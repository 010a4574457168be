# chainloom/rag/__init__.py
"""Retrieval chains: question answering over retrieved documents."""

from .conversational_retrieval import ConversationalRetrieval
from .retrieval_qa import RetrievalQA, Retriever, reduce_tokens_below_limit

__all__ = ["ConversationalRetrieval", "RetrievalQA", "Retriever", "reduce_tokens_below_limit"]
