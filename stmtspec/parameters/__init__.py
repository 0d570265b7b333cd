"""Named-parameter support: scanning ``:name`` commands into ``?`` form."""

from stmtspec.parameters._scanner import (
    PARAMETER_MARKER,
    is_identifier_part,
    is_identifier_start,
    parse_named_parameters,
)
from stmtspec.parameters.types import NamedParameterPlan, ParameterTable

__all__ = (
    "PARAMETER_MARKER",
    "NamedParameterPlan",
    "ParameterTable",
    "is_identifier_part",
    "is_identifier_start",
    "parse_named_parameters",
)
