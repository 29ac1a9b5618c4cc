"""
Clause parser for manifest header values.

A header value is a comma separated list of clauses. Each clause holds one
or more paths followed by attributes (name=value) and directives
(name:=value):

    com.acme.api;com.acme.spi;version="[1.0,2)";resolution:=optional

The scanner tracks quote state over the whole value, so separators inside
quoted strings never split a clause or a parameter.
"""
from dataclasses import dataclass
from typing import Iterator, Optional

from core.exceptions import MalformedHeaderError

QUOTE = '"'
ESCAPE = "\\"
CLAUSE_SEPARATOR = ","
ELEMENT_SEPARATOR = ";"
ATTRIBUTE_OPERATOR = "="
DIRECTIVE_MARKER = ":"

# A token containing any of these (or whitespace) is quoted in canonical form
_SPECIAL_CHARS = frozenset(',;=:"\\')
# Not allowed in attribute or directive names
_NAME_FORBIDDEN = frozenset('"\\:')


def format_token(token: str) -> str:
    """
    Render a path or parameter value for the canonical form.

    Plain tokens are emitted as-is. Anything empty, containing whitespace
    or a separator is quoted, with backslash and quote escaped.
    """
    if token and not any(c in _SPECIAL_CHARS or c.isspace() for c in token):
        return token
    escaped = token.replace(ESCAPE, ESCAPE * 2).replace(QUOTE, ESCAPE + QUOTE)
    return f"{QUOTE}{escaped}{QUOTE}"


@dataclass(frozen=True)
class Clause:
    """
    One comma separated unit of a header value.

    Paths keep their original order. Attributes and directives are stored
    as name-sorted tuples of (name, value) pairs; a dict may be passed in
    and is normalized on construction.
    """
    paths: tuple[str, ...]
    attributes: tuple[tuple[str, str], ...] = ()
    directives: tuple[tuple[str, str], ...] = ()

    def __post_init__(self):
        if not self.paths:
            raise ValueError("A clause requires at least one path")
        object.__setattr__(self, "paths", tuple(self.paths))
        object.__setattr__(self, "attributes", tuple(sorted(dict(self.attributes).items())))
        object.__setattr__(self, "directives", tuple(sorted(dict(self.directives).items())))

    def attribute(self, name: str) -> Optional[str]:
        return dict(self.attributes).get(name)

    def directive(self, name: str) -> Optional[str]:
        return dict(self.directives).get(name)

    def canonical_key(self) -> str:
        """
        Stable string form used for set membership.

        Paths in original order, then attributes, then directives, each
        group sorted by name. Two clauses share a key only if they are equal.
        """
        parts = [format_token(path) for path in self.paths]
        parts.extend(f"{name}={format_token(value)}" for name, value in self.attributes)
        parts.extend(f"{name}:={format_token(value)}" for name, value in self.directives)
        return ELEMENT_SEPARATOR.join(parts)

    def __str__(self) -> str:
        return self.canonical_key()


@dataclass(frozen=True, eq=False)
class ParsedHeaderValue:
    """The clauses of one header value, compared as a set."""
    header: str
    clauses: tuple[Clause, ...]

    @property
    def keys(self) -> frozenset[str]:
        return frozenset(clause.canonical_key() for clause in self.clauses)

    def __eq__(self, other):
        if not isinstance(other, ParsedHeaderValue):
            return NotImplemented
        return self.keys == other.keys

    def __hash__(self):
        return hash(self.keys)

    def __len__(self) -> int:
        return len(self.clauses)

    def __iter__(self) -> Iterator[Clause]:
        return iter(self.clauses)


def _split_clauses(header: str, value: str) -> list[list[str]]:
    """
    Split a raw value into clauses of raw elements.

    Quotes (and backslash escapes inside them) are kept in the elements;
    only separators outside quotes split.
    """
    clauses = []
    elements = []
    current = []
    in_quotes = False
    escaped = False

    for char in value:
        if in_quotes:
            current.append(char)
            if escaped:
                escaped = False
            elif char == ESCAPE:
                escaped = True
            elif char == QUOTE:
                in_quotes = False
            continue

        if char == QUOTE:
            in_quotes = True
            current.append(char)
        elif char == ELEMENT_SEPARATOR:
            elements.append("".join(current))
            current = []
        elif char == CLAUSE_SEPARATOR:
            elements.append("".join(current))
            clauses.append(elements)
            elements = []
            current = []
        else:
            current.append(char)

    if in_quotes:
        raise MalformedHeaderError(header, value, "unbalanced quotes")

    elements.append("".join(current))
    clauses.append(elements)
    return clauses


def _find_operator(raw: str) -> int:
    """Index of the first '=' outside quotes, or -1."""
    in_quotes = False
    escaped = False
    for index, char in enumerate(raw):
        if in_quotes:
            if escaped:
                escaped = False
            elif char == ESCAPE:
                escaped = True
            elif char == QUOTE:
                in_quotes = False
        elif char == QUOTE:
            in_quotes = True
        elif char == ATTRIBUTE_OPERATOR:
            return index
    return -1


def _unquote(raw: str) -> tuple[str, bool]:
    """
    Resolve a raw token to its value.

    Returns the token and whether any part of it was quoted, so an
    explicitly empty value ("") can be told apart from a missing one.
    """
    chars = []
    quoted = False
    in_quotes = False
    escaped = False

    for char in raw.strip():
        if in_quotes:
            if escaped:
                chars.append(char)
                escaped = False
            elif char == ESCAPE:
                escaped = True
            elif char == QUOTE:
                in_quotes = False
            else:
                chars.append(char)
        elif char == QUOTE:
            in_quotes = True
            quoted = True
        else:
            chars.append(char)

    return "".join(chars), quoted


def _check_name(header: str, value: str, name: str, kind: str):
    if not name:
        raise MalformedHeaderError(header, value, f"{kind} with empty name")
    if any(c in _NAME_FORBIDDEN or c.isspace() for c in name):
        raise MalformedHeaderError(header, value, f"invalid {kind} name '{name}'")


def _parse_clause(header: str, value: str, elements: list[str]) -> Clause:
    paths = []
    attributes = {}
    directives = {}

    if len(elements) == 1 and not elements[0].strip():
        raise MalformedHeaderError(header, value, "empty clause")

    for raw in elements:
        operator = _find_operator(raw)

        if operator < 0:
            if attributes or directives:
                raise MalformedHeaderError(header, value, f"path '{raw.strip()}' after parameters")
            token, _ = _unquote(raw)
            if not token:
                raise MalformedHeaderError(header, value, "empty path")
            paths.append(token)
            continue

        name = raw[:operator]
        is_directive = name.endswith(DIRECTIVE_MARKER)
        if is_directive:
            name = name[:-1]
        name = name.strip()
        kind = "directive" if is_directive else "attribute"
        _check_name(header, value, name, kind)

        token, quoted = _unquote(raw[operator + 1:])
        if not token and not quoted:
            raise MalformedHeaderError(header, value, f"{kind} '{name}' has no value")

        target = directives if is_directive else attributes
        if name in target:
            raise MalformedHeaderError(header, value, f"duplicate {kind} '{name}'")
        target[name] = token

    if not paths:
        raise MalformedHeaderError(header, value, "clause has no path")

    return Clause(tuple(paths), attributes, directives)


def parse_header(header: str, value: str) -> ParsedHeaderValue:
    """
    Parse one raw header value into its clauses.

    Duplicate clauses collapse; the first occurrence keeps its position.

    Raises:
        MalformedHeaderError: unbalanced quotes, empty clause or path,
            parameter with an empty name or missing value, a duplicate
            parameter within a clause, or a path after a parameter.
    """
    clauses = {}
    for elements in _split_clauses(header, value):
        clause = _parse_clause(header, value, elements)
        clauses.setdefault(clause.canonical_key(), clause)
    return ParsedHeaderValue(header=header, clauses=tuple(clauses.values()))
