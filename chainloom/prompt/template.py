# chainloom/prompt/template.py
"""
Minimal template renderer.

Chains only depend on the renderer contract (``format``,
``format_prompt``, ``input_variables``); this implementation uses
``str.format`` placeholders and exists so chains have working defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from string import Formatter
from typing import Any, Dict, List, Mapping, Protocol

from chainloom.core.exceptions import MissingInputKeyError


@dataclass(frozen=True)
class StringPromptValue:
    """A rendered prompt, convertible to plain text or chat messages."""

    text: str

    def to_string(self) -> str:
        return self.text

    def to_messages(self) -> List[Dict[str, str]]:
        return [{"role": "user", "content": self.text}]


class TemplateRenderer(Protocol):
    """Renderer contract consumed by LLMChain. Don't check isinstance."""

    def input_variables(self) -> List[str]: ...

    def format(self, values: Mapping[str, Any]) -> str: ...

    def format_prompt(self, values: Mapping[str, Any]) -> StringPromptValue: ...


@dataclass(frozen=True)
class PromptTemplate:
    """
    ``str.format``-style template.

    Examples:
        >>> t = PromptTemplate("Answer {question} using {context}")
        >>> t.input_variables()
        ['question', 'context']
        >>> t.format({"question": "Q", "context": "C"})
        'Answer Q using C'
    """

    template: str
    _variables: tuple = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        names: list[str] = []
        for _, name, _, _ in Formatter().parse(self.template):
            if name is None or name == "":
                continue
            # "{doc.title}" / "{items[0]}" still bind the root variable
            root = name.split(".", 1)[0].split("[", 1)[0]
            if root not in names:
                names.append(root)
        object.__setattr__(self, "_variables", tuple(names))

    def input_variables(self) -> List[str]:
        return list(self._variables)

    def format(self, values: Mapping[str, Any]) -> str:
        for name in self._variables:
            if name not in values:
                raise MissingInputKeyError(name, chain="PromptTemplate")
        return self.template.format(**{name: values[name] for name in self._variables})

    def format_prompt(self, values: Mapping[str, Any]) -> StringPromptValue:
        return StringPromptValue(self.format(values))


__all__ = ["PromptTemplate", "StringPromptValue", "TemplateRenderer"]
