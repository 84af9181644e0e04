"""Doc comment extraction."""

from __future__ import annotations

from typing import Iterable

from ..syntax.nodes import Attribute


def extract_doc(attributes: Iterable[Attribute]) -> str:
    """Join the trimmed text of every ``doc`` attribute with newlines."""
    return "\n".join(
        (attribute.value or "").strip() for attribute in attributes if attribute.path == "doc"
    )


__all__ = ["extract_doc"]
