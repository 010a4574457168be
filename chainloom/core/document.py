# chainloom/core/document.py
"""
Document - immutable (page content, metadata) pair.

Produced by retrievers, consumed read-only by the document-combination chains.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Sequence


@dataclass(frozen=True)
class Document:
    """A retrieved piece of text plus its metadata."""

    page_content: str
    metadata: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        # Freeze the metadata view so consumers cannot mutate the producer's dict
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    def __repr__(self) -> str:
        preview = (
            self.page_content[:50] + "..." if len(self.page_content) > 50 else self.page_content
        )
        return f"Document({preview!r})"


def is_document_sequence(value: Any) -> bool:
    """True for a list/tuple whose elements are all Documents."""
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        return False
    return all(isinstance(doc, Document) for doc in value)


__all__ = ["Document", "is_document_sequence"]
