"""
Elementary connectives of two-valued propositional logic.

The trailing underscore on not_/and_/or_ avoids the Python keywords. Inline
proposition bodies are compiled with CONNECTIVES in scope, next to the plain
not/and/or operators.
"""

from __future__ import annotations
from typing import Callable, Dict


def not_(a: bool) -> bool:
    return not a


def and_(a: bool, b: bool) -> bool:
    return a and b


def or_(a: bool, b: bool) -> bool:
    return a or b


def xor(a: bool, b: bool) -> bool:
    return a != b


def imply(a: bool, b: bool) -> bool:
    """Material implication: a -> b is equivalent to ¬a ∨ b."""
    return not a or b


def iff(a: bool, b: bool) -> bool:
    """Biconditional: (a -> b) ∧ (b -> a)."""
    return imply(a, b) and imply(b, a)


CONNECTIVES: Dict[str, Callable[..., bool]] = {
    "not_": not_,
    "and_": and_,
    "or_": or_,
    "xor": xor,
    "imply": imply,
    "iff": iff,
}
