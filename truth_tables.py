"""
Truth tables for compound propositions over n atomic propositions.

Main features:
- Enumerate every truth assignment of n atomics in a fixed order
  (descending binary, all-true first, all-false last)
- Normalize propositions given by reference, as (name, body) pairs or as
  inline expression strings into one (name, function) shape
- Evaluate every proposition on every assignment and collect a TruthTable
- Convert a TruthTable to a pandas DataFrame or a numpy boolean matrix

Rendering, plotting and export live in table_display.
"""

from __future__ import annotations
from dataclasses import dataclass
from itertools import product
from typing import Any, Callable, Iterator, List, Mapping, Sequence, Tuple
import ast
import inspect
import keyword

import numpy as np
import pandas as pd

from connectives import CONNECTIVES


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TruthTableError(ValueError):
    """Base class for caller contract violations when building a table."""


class AtomicNameError(TruthTableError):
    """Atomic names are empty, not strings, or not pairwise unique."""


class PropositionError(TruthTableError):
    """A proposition cannot be normalized to a (name, function) pair."""


class PropositionArityError(PropositionError):
    def __init__(self, name: str, expected: int):
        self.name = name
        self.expected = expected
        super().__init__(
            f"proposition {name!r} must accept exactly {expected} "
            f"positional boolean argument(s), one per atomic proposition"
        )


class PropositionResultError(PropositionError):
    def __init__(self, name: str, result: Any):
        self.name = name
        self.result = result
        super().__init__(
            f"proposition {name!r} returned {result!r} "
            f"({type(result).__name__}), expected a bool"
        )


# ---------------------------------------------------------------------------
# Assignment enumeration
# ---------------------------------------------------------------------------


def possible_truth_values(n: int) -> List[Tuple[bool, ...]]:
    """
    Return all 2^n truth assignments of n atomic propositions.

    Rows are in descending binary order, reading each assignment as a
    big-endian number with True = 1: row k holds the bits of 2^n - 1 - k.
    Example for n = 2:
        [(True, True), (True, False), (False, True), (False, False)]

    For n = 0 the result is [()], the single empty assignment.
    """
    if isinstance(n, bool) or not isinstance(n, (int, np.integer)):
        raise TypeError(f"number of atomics must be an int, got {type(n).__name__}")
    if n < 0:
        raise ValueError(f"number of atomics must be non-negative, got {n}")
    return list(product((True, False), repeat=int(n)))


# ---------------------------------------------------------------------------
# Propositions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Proposition:
    name: str
    function: Callable[..., bool]

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise PropositionError(
                f"proposition names must be non-empty strings, got {self.name!r}"
            )
        if not callable(self.function):
            raise PropositionError(f"proposition {self.name!r} is not callable")


def _check_inline_node(name: str, node: ast.AST, atomic_names: Sequence[str]) -> None:
    if isinstance(node, ast.BoolOp):
        for value in node.values:
            _check_inline_node(name, value, atomic_names)
    elif isinstance(node, ast.UnaryOp) and isinstance(node.op, ast.Not):
        _check_inline_node(name, node.operand, atomic_names)
    elif isinstance(node, ast.Constant) and isinstance(node.value, bool):
        pass
    elif isinstance(node, ast.Name):
        if node.id not in atomic_names:
            raise PropositionError(
                f"inline proposition {name!r} refers to undeclared name {node.id!r}"
            )
    elif isinstance(node, ast.Call):
        func = node.func
        if (
            not isinstance(func, ast.Name)
            or func.id not in CONNECTIVES
            or func.id in atomic_names
        ):
            raise PropositionError(
                f"inline proposition {name!r} may only call the connectives "
                f"{', '.join(CONNECTIVES)}"
            )
        if node.keywords:
            raise PropositionError(
                f"inline proposition {name!r} passes keyword arguments to {func.id}"
            )
        try:
            inspect.signature(CONNECTIVES[func.id]).bind(*node.args)
        except TypeError as e:
            raise PropositionError(
                f"inline proposition {name!r} calls {func.id} with "
                f"{len(node.args)} argument(s)"
            ) from e
        for arg in node.args:
            _check_inline_node(name, arg, atomic_names)
    else:
        raise PropositionError(
            f"inline proposition {name!r} uses unsupported syntax "
            f"{type(node).__name__}; only and/or/not, True/False, atomic names "
            f"and connective calls are allowed"
        )


def inline(name: str, body: str, atomic_names: Sequence[str]) -> Proposition:
    """Compile an expression over the atomic names into a Proposition.

    The body may use the atomic names, and/or/not, True/False and calls to
    the connectives (not_, and_, or_, xor, imply, iff); anything else is
    rejected before compiling. The synthesized function takes exactly one
    parameter per atomic, in declared order.
    """
    for atomic in atomic_names:
        if not atomic.isidentifier() or keyword.iskeyword(atomic):
            raise PropositionError(
                f"inline proposition {name!r} needs atomic names that are "
                f"Python identifiers, got {atomic!r}"
            )
    try:
        tree = ast.parse(body, mode="eval")
    except SyntaxError as e:
        raise PropositionError(
            f"inline proposition {name!r} is not a valid expression: {body!r}"
        ) from e
    _check_inline_node(name, tree.body, atomic_names)

    parameters = ast.arguments(
        posonlyargs=[],
        args=[ast.arg(arg=atomic) for atomic in atomic_names],
        kwonlyargs=[],
        kw_defaults=[],
        defaults=[],
    )
    expression = ast.Expression(body=ast.Lambda(args=parameters, body=tree.body))
    code = compile(ast.fix_missing_locations(expression), f"<proposition {name}>", "eval")
    function = eval(code, {"__builtins__": {}, **CONNECTIVES})
    function.__name__ = name
    return Proposition(name, function)


def _is_named_pair(item: Any) -> bool:
    return (
        isinstance(item, tuple)
        and len(item) == 2
        and isinstance(item[0], str)
        and (callable(item[1]) or isinstance(item[1], str))
    )


def _to_proposition(item: Any, atomic_names: Sequence[str]) -> Proposition:
    if isinstance(item, Proposition):
        return item
    if _is_named_pair(item):
        name, body = item
        if isinstance(body, str):
            return inline(name, body, atomic_names)
        return Proposition(name, body)
    if callable(item):
        name = getattr(item, "__name__", None)
        if not name or name == "<lambda>":
            raise PropositionError(
                f"{item!r} has no usable name; pass it as a (name, function) pair"
            )
        return Proposition(name, item)
    raise PropositionError(
        f"cannot interpret {item!r} as a proposition; expected a named "
        f"function, a (name, function) pair or a (name, expression) pair"
    )


def as_propositions(
    atomic_names: Sequence[str],
    propositions: Any,
) -> Tuple[Proposition, ...]:
    """
    Normalize every supported declaration style to a tuple of Propositions.

    Accepted forms:
        f                               a single named function
        ("name", body)                  a single inline pair
        [f, ("name", body), ...]        a list or tuple mixing both
        {"name": body, ...}             a mapping of names to bodies
        None                            no propositions
    where body is either a function or an expression string.
    """
    if propositions is None:
        items: List[Any] = []
    elif isinstance(propositions, Mapping):
        items = list(propositions.items())
    elif (
        isinstance(propositions, Proposition)
        or _is_named_pair(propositions)
        or callable(propositions)
    ):
        items = [propositions]
    elif isinstance(propositions, (list, tuple)):
        items = list(propositions)
    else:
        raise PropositionError(
            f"unsupported propositions argument of type {type(propositions).__name__}"
        )
    return tuple(_to_proposition(item, atomic_names) for item in items)


# ---------------------------------------------------------------------------
# Truth table
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TruthTable:
    """
    Header plus one row per assignment, in possible_truth_values order.

    Each row holds the n atomic values followed by the m proposition results.
    """

    atomic_names: Tuple[str, ...]
    proposition_names: Tuple[str, ...]
    rows: Tuple[Tuple[bool, ...], ...]

    def __post_init__(self):
        width = len(self.header)
        for row in self.rows:
            if len(row) != width:
                raise TruthTableError(
                    f"row {row!r} has {len(row)} cells, header has {width}"
                )
        expected = 2 ** len(self.atomic_names)
        if len(self.rows) != expected:
            raise TruthTableError(
                f"table over {len(self.atomic_names)} atomics needs {expected} rows, "
                f"got {len(self.rows)}"
            )

    @property
    def header(self) -> Tuple[str, ...]:
        return self.atomic_names + self.proposition_names

    @property
    def n_atomics(self) -> int:
        return len(self.atomic_names)

    @property
    def n_propositions(self) -> int:
        return len(self.proposition_names)

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[Tuple[bool, ...]]:
        return iter(self.rows)

    def column(self, name: str) -> Tuple[bool, ...]:
        """Return the values of one atomic or proposition column."""
        try:
            index = self.header.index(name)
        except ValueError:
            raise KeyError(name) from None
        return tuple(row[index] for row in self.rows)

    def to_array(self) -> np.ndarray:
        """Boolean matrix of shape (2^n, n + m)."""
        return np.array(self.rows, dtype=bool).reshape(len(self.rows), len(self.header))

    def to_frame(self) -> pd.DataFrame:
        """pandas DataFrame with the header as columns and bool cells."""
        return pd.DataFrame(self.to_array(), columns=list(self.header))


def _check_atomic_names(atomic_names: Sequence[str]) -> Tuple[str, ...]:
    if isinstance(atomic_names, str):
        raise AtomicNameError(
            f"atomic names must be a sequence of names, got the string {atomic_names!r}"
        )
    names = tuple(atomic_names)
    for name in names:
        if not isinstance(name, str) or not name:
            raise AtomicNameError(
                f"atomic names must be non-empty strings, got {name!r}"
            )
    duplicates = sorted({name for name in names if names.count(name) > 1})
    if duplicates:
        raise AtomicNameError(f"duplicate atomic names: {', '.join(duplicates)}")
    return names


def _check_arity(proposition: Proposition, n: int) -> None:
    try:
        signature = inspect.signature(proposition.function)
    except (TypeError, ValueError):
        # builtins without introspectable signatures are checked by the call
        return
    try:
        signature.bind(*([True] * n))
    except TypeError as e:
        raise PropositionArityError(proposition.name, n) from e


def _evaluate(proposition: Proposition, assignment: Tuple[bool, ...]) -> bool:
    result = proposition.function(*assignment)
    if not isinstance(result, (bool, np.bool_)):
        raise PropositionResultError(proposition.name, result)
    return bool(result)


def truth_table(
    atomic_names: Sequence[str],
    propositions: Any = None,
) -> TruthTable:
    """
    Evaluate every proposition on every assignment of the atomic names.

    Parameters
    ----------
    atomic_names:
        Names of the atomic propositions, for example ["p", "q", "r"].
        Their order is the positional order of every proposition's arguments.
    propositions:
        One proposition or a collection of them, see as_propositions.

    Returns
    -------
    TruthTable
        Header = atomic names + proposition names, one row per assignment.

    Raises
    ------
    AtomicNameError
        Empty, non-string or repeated atomic names.
    PropositionError
        Unusable declarations or column names that collide.
    PropositionArityError
        A proposition that does not take one argument per atomic; raised
        before any row is evaluated.
    PropositionResultError
        A proposition that returns something other than a bool.
    """
    names = _check_atomic_names(atomic_names)
    props = as_propositions(names, propositions)

    header = list(names)
    for prop in props:
        if prop.name in header:
            raise PropositionError(f"column name {prop.name!r} is used twice")
        header.append(prop.name)

    n = len(names)
    for prop in props:
        _check_arity(prop, n)

    rows = tuple(
        assignment + tuple(_evaluate(prop, assignment) for prop in props)
        for assignment in possible_truth_values(n)
    )
    return TruthTable(names, tuple(prop.name for prop in props), rows)


# ---------------------------------------------------------------------------
# Optional demo in script mode
# ---------------------------------------------------------------------------


def _demo() -> None:
    """Print the truth table of one compound proposition in both styles."""
    from table_display import print_truth_table
    from connectives import iff

    def compound_proposition(p: bool, q: bool, r: bool) -> bool:
        return iff(q, (p and not q) or (not p and q)) and r

    print_truth_table(["p", "q", "r"], compound_proposition)
    print()
    print_truth_table(
        ["p", "q", "r"],
        [
            compound_proposition,
            ("inline_compound_proposition", "iff(q, (p and not q) or (not p and q)) and r"),
        ],
    )


if __name__ == "__main__":
    _demo()
