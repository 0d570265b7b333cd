"""Lexical scanner converting ``:name`` placeholders into ``?`` placeholders.

The scanner makes one forward pass over the command. It knows nothing of SQL
beyond string literals (``'...'``), quoted identifiers (``"..."``), line
comments (``--``) and non-nested block comments (``/* ... */``); text inside
those is copied verbatim and never yields parameters. Anything else it cannot
classify is ordinary text, so it never fails.

Parameter names follow Python identifier rules: a name starts with a
character ``c`` for which ``c.isidentifier()`` holds and continues with
characters for which ``("_" + c).isidentifier()`` holds.

A ``:`` directly after another ``:`` is not a marker, so PostgreSQL casts
(``x::int``) pass through untouched. The character tested is the last one
consumed, including the last character of a parameter name: a ``:`` right
after a name starts a new parameter, and ``:a:b`` holds the two parameters
``a`` and ``b``.
"""

from typing import Final, Optional

from mypy_extensions import mypyc_attr

from stmtspec.parameters.types import NamedParameterPlan, ParameterTable

__all__ = (
    "PARAMETER_MARKER",
    "POSITIONAL_MARKER",
    "is_identifier_part",
    "is_identifier_start",
    "parse_named_parameters",
)

PARAMETER_MARKER: Final = ":"
POSITIONAL_MARKER: Final = "?"


def is_identifier_start(char: Optional[str]) -> bool:
    return char is not None and char.isidentifier()


def is_identifier_part(char: str) -> bool:
    return f"_{char}".isidentifier()


@mypyc_attr(allow_interpreted_subclasses=False)
class _NamedParameterScanner:
    __slots__ = ("_count", "_index", "_last", "_out", "_positions", "_source")

    def __init__(self, source: str) -> None:
        self._source = source
        self._index = 0
        self._count = 0
        self._last: Optional[str] = None
        self._out: list[str] = []
        self._positions: dict[str, list[int]] = {}

    def scan(self) -> NamedParameterPlan:
        while self._has_more():
            previous = self._last
            char = self._next()
            peek = self._peek()
            if char == PARAMETER_MARKER and previous != PARAMETER_MARKER and is_identifier_start(peek):
                self._consume_parameter()
            elif char in {"'", '"'}:
                self._consume_until(char)
            elif char == "-" and peek == "-":
                self._consume_until("\n")
            elif char == "/" and peek == "*":
                self._consume_block_comment()

        table = ParameterTable({name: tuple(positions) for name, positions in self._positions.items()})
        return NamedParameterPlan(self._source, "".join(self._out), table)

    def _has_more(self) -> bool:
        return self._index < len(self._source)

    def _peek(self) -> Optional[str]:
        return self._source[self._index] if self._has_more() else None

    def _next(self) -> str:
        """Copy the next character to the output and return it."""
        char = self._source[self._index]
        self._index += 1
        self._last = char
        self._out.append(char)
        return char

    def _consume_parameter(self) -> None:
        self._out[-1] = POSITIONAL_MARKER
        start = self._index
        self._index += 1
        while self._has_more() and is_identifier_part(self._source[self._index]):
            self._index += 1
        name = self._source[start : self._index]
        self._last = name[-1]

        self._count += 1
        self._positions.setdefault(name, []).append(self._count)

    def _consume_until(self, end: str) -> None:
        """Copy up to and including ``end``, or to the end of input."""
        while self._has_more():
            if self._next() == end:
                break

    def _consume_block_comment(self) -> None:
        self._next()
        while self._has_more():
            self._consume_until("*")
            if self._peek() == "/":
                self._next()
                break


def parse_named_parameters(source: str) -> NamedParameterPlan:
    """Convert a command with ``:name`` placeholders to positional form.

    Every ``:name`` outside literals and comments becomes a single ``?`` and
    its 1-based ordinal among the substituted placeholders is recorded for
    ``name``. A ``:`` directly following another ``:`` never starts a
    parameter, so casts such as ``'1'::json`` are left alone, while a ``:``
    right after a parameter name starts the next one (``:a:b`` holds ``a``
    and ``b``). Literal ``?`` characters in ``source`` are copied but not
    counted.

    Args:
        source: The command text. Any string is accepted, including unterminated
            literals or comments.

    Returns:
        The immutable plan holding the source, the converted command and the
        parameter table.

    Example:
        >>> plan = parse_named_parameters("SELECT :x, :y, :x")
        >>> plan.converted
        'SELECT ?, ?, ?'
        >>> plan.get_positions("x")
        (1, 3)
    """
    return _NamedParameterScanner(source).scan()
