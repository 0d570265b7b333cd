"""Immutable results of named-parameter scanning."""

from collections.abc import Iterator, Mapping
from typing import Optional

from mypy_extensions import mypyc_attr

__all__ = ("NamedParameterPlan", "ParameterTable")


@mypyc_attr(allow_interpreted_subclasses=False)
class ParameterTable(Mapping[str, "tuple[int, ...]"]):
    """Read-only mapping of parameter name to its 1-based positions.

    Names are case-sensitive and stored without the leading ``:``. Iteration
    follows the order in which names first occurred in the command. Each
    position tuple is non-empty and strictly increasing, and the positions of
    all names together form ``1..N``.
    """

    __slots__ = ("_positions",)

    def __init__(self, positions: "Optional[Mapping[str, tuple[int, ...]]]" = None) -> None:
        self._positions: dict[str, tuple[int, ...]] = dict(positions) if positions else {}

    def __getitem__(self, name: str) -> "tuple[int, ...]":
        return self._positions[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._positions)

    def __len__(self) -> int:
        return len(self._positions)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._positions!r})"

    def __hash__(self) -> int:
        return hash(tuple(self._positions.items()))

    def get_positions(self, name: str) -> "Optional[tuple[int, ...]]":
        """Return the positions recorded for ``name``, or ``None`` if it never occurred."""
        return self._positions.get(name)

    def names(self) -> Iterator[str]:
        """Iterate the recorded names in first-occurrence order."""
        return iter(self._positions)

    @property
    def parameter_count(self) -> int:
        """Total number of named substitutions, i.e. the highest position."""
        return sum(len(positions) for positions in self._positions.values())


@mypyc_attr(allow_interpreted_subclasses=False)
class NamedParameterPlan:
    """A command with named parameters, converted to positional form.

    Created once per command text by
    :func:`~stmtspec.parameters.parse_named_parameters` and never mutated
    afterwards, so a plan can be shared between threads and statements.

    Args:
        source: The original command text.
        converted: ``source`` with every named placeholder replaced by ``?``.
        table: Positions of each name in ``converted``.
    """

    __slots__ = ("_converted", "_source", "_table")

    def __init__(self, source: str, converted: str, table: ParameterTable) -> None:
        self._source = source
        self._converted = converted
        self._table = table

    @property
    def source(self) -> str:
        return self._source

    @property
    def converted(self) -> str:
        return self._converted

    @property
    def table(self) -> ParameterTable:
        return self._table

    @property
    def parameter_count(self) -> int:
        """Number of ``?`` markers produced from named parameters.

        Literal ``?`` characters already present in the source are not counted.
        """
        return self._table.parameter_count

    def get_positions(self, name: str) -> "Optional[tuple[int, ...]]":
        return self._table.get_positions(name)

    def names(self) -> Iterator[str]:
        return self._table.names()

    def __contains__(self, name: object) -> bool:
        return name in self._table

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NamedParameterPlan):
            return False
        return self._source == other._source and self._converted == other._converted and self._table == other._table

    def __hash__(self) -> int:
        return hash((self._source, self._converted, self._table))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(source={self._source!r}, converted={self._converted!r}, table={self._table!r})"

    def __str__(self) -> str:
        return self._source
