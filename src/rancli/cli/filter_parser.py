"""
Filter query compiler for the topology commands.

Grammar:
    query       = clause ("," clause)*
    clause      = key ws? operator ws? rhs
    operator    = "!=" | "=" | "in" | "!in"
    rhs(=, !=)  = literal
    rhs(in)     = "(" literal ("," literal)* ")"

Clauses are combined with an implicit AND. There is no escaping of ``,``,
``(``, ``)`` or ``=`` inside a literal.

Examples:
    role=leaf
    role=leaf, zone!=west
    rack in (3, 4, 5)
    rack !in (1,2)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from rancli.exceptions import FilterSyntaxError

logger = logging.getLogger(__name__)


class Operator(Enum):
    """Operator forms recognized in a clause."""
    NOT_IN = "!in"
    IN = "in"
    NOT_EQUAL = "!="
    EQUAL = "="


class ObjectType(Enum):
    """Topology object types a query can target."""
    UNSPECIFIED = "UNSPECIFIED"
    ENTITY = "ENTITY"
    RELATION = "RELATION"
    KIND = "KIND"


# Tested in order. "!=" contains "=", and list clauses must win over both.
OPERATOR_RULES: tuple[tuple[str, Operator], ...] = (
    (" !in (", Operator.NOT_IN),
    (" in (", Operator.IN),
    ("!=", Operator.NOT_EQUAL),
    ("=", Operator.EQUAL),
)

_TOKENS = {op: token for token, op in OPERATOR_RULES}


# Filter nodes
@dataclass
class EqualFilter:
    """Exact match on a single value."""
    value: str

    def to_dict(self) -> dict[str, Any]:
        return {"equal": {"value": self.value}}


@dataclass
class InFilter:
    """Membership match over a list of values."""
    values: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"in": {"values": list(self.values)}}


@dataclass
class NotFilter:
    """Negation of an inner filter."""
    inner: Filter

    def to_dict(self) -> dict[str, Any]:
        return {"not": {"inner": self.inner.to_dict()}}


Predicate = Union[EqualFilter, InFilter, NotFilter]


@dataclass
class Filter:
    """A predicate tagged with the label key it applies to."""
    key: str
    predicate: Predicate

    def to_dict(self) -> dict[str, Any]:
        return {"key": self.key, **self.predicate.to_dict()}


@dataclass
class Filters:
    """Label and kind filters handed to the topology API, ANDed by the server."""
    label_filters: list[Filter] = field(default_factory=list)
    kind_filters: list[Filter] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "labelFilters": [f.to_dict() for f in self.label_filters],
            "kindFilters": [f.to_dict() for f in self.kind_filters],
        }


@dataclass
class CompileResult:
    """Outcome of compiling one query string.

    ``dropped`` holds the non-empty clauses that matched no operator, in input
    order. ``supported`` is False when the compiler for this filter family is
    not implemented and ``filters`` is empty regardless of the input.
    """
    filters: list[Filter] = field(default_factory=list)
    dropped: list[str] = field(default_factory=list)
    supported: bool = True


# Splitting and classification
def split_clauses(query: str) -> list[str]:
    """Split a query on top-level commas and trim each clause.

    Commas inside parentheses belong to the enclosing clause, so
    ``"a in (1, 2), b=3"`` gives ``["a in (1, 2)", "b=3"]``.
    An empty query yields a single empty clause.
    """
    clauses = []
    depth = 0
    start = 0
    for pos, char in enumerate(query):
        if char == "(":
            depth += 1
        elif char == ")" and depth > 0:
            depth -= 1
        elif char == "," and depth == 0:
            clauses.append(query[start:pos].strip())
            start = pos + 1
    clauses.append(query[start:].strip())
    return clauses


def classify_clause(clause: str) -> Operator | None:
    """Return the operator used by ``clause``, or None if it has none."""
    for token, operator in OPERATOR_RULES:
        if token in clause:
            return operator
    return None


# Extraction
def extract_key(clause: str, operator: Operator) -> str:
    """Return the text before the operator's token, trimmed."""
    return clause.split(_TOKENS[operator], 1)[0].strip()


def extract_value(clause: str) -> str:
    """Return the text after the first ``=``, trimmed."""
    return clause.partition("=")[2].strip()


def extract_values(clause: str) -> list[str]:
    """Return the trimmed, comma-separated values between the parentheses.

    Raises:
        FilterSyntaxError: If the closing parenthesis is missing or the list
            is empty.
    """
    _, _, rest = clause.partition("(")
    body, closed, _ = rest.partition(")")
    if not closed:
        raise FilterSyntaxError("Missing ')' in value list", clause=clause)
    if not body.strip():
        raise FilterSyntaxError("Empty value list", clause=clause)

    values = []
    for value in body.split(","):
        values.append(value.strip())
    return values


# Building
def build_filter(operator: Operator, key: str, values: list[str]) -> Filter:
    """Map an operator, key and extracted value(s) to a filter node.

    Equality operators use ``values[0]``; membership operators use the whole
    list.
    """
    if operator is Operator.EQUAL:
        return Filter(key, EqualFilter(values[0]))
    if operator is Operator.NOT_EQUAL:
        return Filter(key, NotFilter(Filter("", EqualFilter(values[0]))))
    if operator is Operator.IN:
        return Filter(key, InFilter(values))
    return Filter(key, NotFilter(Filter("", InFilter(values))))


def compile_label_filter(clause: str) -> Filter | None:
    """Compile a single trimmed clause, or return None if it is unrecognized."""
    operator = classify_clause(clause)
    if operator is None:
        return None

    key = extract_key(clause, operator)
    if operator in (Operator.IN, Operator.NOT_IN):
        values = extract_values(clause)
    else:
        values = [extract_value(clause)]
    return build_filter(operator, key, values)


def compile_kind_filter(clause: str) -> Filter | None:
    """Kind filter compilation is not implemented; never yields a filter."""
    return None


# Assembly
def _compile_clauses(
    query: str,
    compile_clause: Callable[[str], Filter | None],
) -> CompileResult:
    result = CompileResult()
    for clause in split_clauses(query):
        compiled = compile_clause(clause)
        if compiled is not None:
            result.filters.append(compiled)
        elif clause:
            result.dropped.append(clause)
    return result


def label_filter_result(query: str) -> CompileResult:
    """Compile a label query, keeping track of the clauses that were dropped."""
    return _compile_clauses(query, compile_label_filter)


def kind_filter_result(query: str) -> CompileResult:
    """Compile a kind query. Always reports ``supported=False``."""
    result = _compile_clauses(query, compile_kind_filter)
    result.supported = False
    return result


def compile_label_filters(query: str, strict: bool = False) -> list[Filter]:
    """
    Compile a comma-separated label query into an ordered list of filters.

    Clauses that match no operator are dropped unless ``strict`` is set.

    Args:
        query: The raw query string, e.g. ``"role=leaf, rack in (3,4)"``.
        strict: Raise instead of dropping unrecognized clauses.

    Returns:
        Filters in the order their clauses appear in the query.

    Raises:
        FilterSyntaxError: For a malformed value list, or for an unrecognized
            clause when ``strict`` is set.

    Examples:
        >>> compile_label_filters("a=1,b!=2")
        [Filter(key='a', predicate=EqualFilter(value='1')),
         Filter(key='b', predicate=NotFilter(inner=Filter(key='', ...)))]

        >>> compile_label_filters("garbage, a=1")
        [Filter(key='a', predicate=EqualFilter(value='1'))]
    """
    result = label_filter_result(query)
    for clause in result.dropped:
        if strict:
            raise FilterSyntaxError("Unrecognized filter clause", clause=clause)
        logger.debug("Dropping unrecognized label filter clause %r", clause)
    return result.filters


def compile_kind_filters(query: str) -> list[Filter]:
    """Compile a kind query. Not implemented: always returns an empty list."""
    return kind_filter_result(query).filters


def compile_filters(
    object_type: ObjectType,
    label_query: str,
    kind_query: str = "",
    strict: bool = False,
) -> Filters:
    """
    Build the filters for a topology query.

    Label filters are always compiled. Kind filters are only considered when
    the query targets kinds or relations; a kind query given for any other
    type is ignored with a warning. Only label compilation raises.
    """
    filters = Filters(label_filters=compile_label_filters(label_query, strict=strict))
    if object_type in (ObjectType.KIND, ObjectType.RELATION):
        result = kind_filter_result(kind_query)
        if not result.supported and result.dropped:
            logger.warning("Kind filters are not supported yet; ignoring %r", kind_query)
        filters.kind_filters = result.filters
    elif kind_query.strip():
        logger.warning(
            "Kind filters only apply to relations and kinds; ignoring %r", kind_query,
        )
    return filters
