# backend/quizdeck/core/resolver.py

import re
from typing import List, Optional, Sequence

from .schemas import Choice

_INDEX_RE = re.compile(r"[0-9]+")


def _as_index(value: str, choices: Sequence[Choice]) -> Optional[int]:
    if not isinstance(value, str) or not _INDEX_RE.fullmatch(value):
        return None
    idx = int(value)
    return idx if idx < len(choices) else None


def resolve_choice(value: str, choices: Optional[Sequence[Choice]]) -> str:
    """
    Translate a positional index into the choice's stable id.

    Values that are not an in-range index (or point at a choice without an id)
    pass through verbatim so the store can reject them. A numeric id that is
    also a valid index is read as an index.
    """
    idx = _as_index(value, choices or [])
    if idx is None:
        return value
    return choices[idx].id or value


def resolve_choices(values: Sequence[str], choices: Optional[Sequence[Choice]]) -> List[str]:
    """Resolve each value independently; order and duplicates are kept."""
    return [resolve_choice(v, choices) for v in values]


def choice_text(identifier: str, choices: Optional[Sequence[Choice]], by_index: bool = True) -> str:
    """Display text for a choice id (or index), falling back to the identifier."""
    for c in choices or []:
        if c.id is not None and c.id == identifier:
            return c.text
    idx = _as_index(identifier, choices or []) if by_index else None
    if idx is not None:
        return choices[idx].text
    return identifier
