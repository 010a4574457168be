# chainloom/core/values.py
"""
ChainValues - the input/output carrier shared by every chain.

A plain ``dict`` subclass: string keys, arbitrarily-typed values. Chains
derive new mappings for child calls with copy()/omit() so the caller's
mapping is never mutated.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from chainloom.core.exceptions import MissingInputKeyError, TypeMismatchError


class ChainValues(dict):
    """
    Mapping of named chain inputs or outputs.

    Examples:
        >>> values = ChainValues({"question": "What is RAG?"})
        >>> values.get_string("question")
        'What is RAG?'
        >>> values.omit("question")
        {}
    """

    def get_string(self, key: str) -> str:
        """
        Return the value under ``key`` as text.

        Raises:
            MissingInputKeyError: If the key is absent
            TypeMismatchError: If the value is present but not a str
        """
        if key not in self:
            raise MissingInputKeyError(key)

        value = self[key]
        if not isinstance(value, str):
            raise TypeMismatchError(
                f"value for key {key!r} is {type(value).__name__}, expected str"
            )

        return value

    def get_raw(self, key: str, default: Any = None) -> Any:
        return self.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self[key] = value

    def copy(self) -> "ChainValues":
        """Independent shallow copy."""
        return ChainValues(self)

    def merge(self, other: Mapping[str, Any]) -> "ChainValues":
        """Shallow copy with ``other`` applied on top (other wins on conflict)."""
        merged = ChainValues(self)
        merged.update(other)
        return merged

    def omit(self, *keys: str | Iterable[str]) -> "ChainValues":
        """Shallow copy without the given keys."""
        excluded: set[str] = set()
        for key in keys:
            if isinstance(key, str):
                excluded.add(key)
            else:
                excluded.update(key)

        return ChainValues({k: v for k, v in self.items() if k not in excluded})


def as_chain_values(values: Mapping[str, Any] | None) -> ChainValues:
    """Copy any mapping into a fresh ChainValues."""
    return ChainValues(values or {})


__all__ = ["ChainValues", "as_chain_values"]
