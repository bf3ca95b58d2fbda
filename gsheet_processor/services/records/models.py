"""Data models used by the record processor."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping

RawGrid = List[List[str]]
HeaderMap = Dict[int, str]
Record = Dict[str, str]
FilterSpec = Mapping[str, str]

OPERATOR_AND = "and"
OPERATOR_OR = "or"
MATCH_STRICT = "strict"
MATCH_LOOSE = "loose"


@dataclass(slots=True, frozen=True)
class FilterOptions:
    """How per-field matches are evaluated and combined.

    ``operator`` is kept verbatim: anything other than ``"and"``/``"or"``
    (including ``None``) matches no record.
    """

    operator: str | None = None
    matching: str | None = MATCH_LOOSE

    @property
    def matching_mode(self) -> str:
        return self.matching or MATCH_LOOSE

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "FilterOptions":
        if not data:
            return cls()
        return cls(operator=data.get("operator"), matching=data.get("matching"))


__all__ = [
    "FilterOptions",
    "FilterSpec",
    "HeaderMap",
    "MATCH_LOOSE",
    "MATCH_STRICT",
    "OPERATOR_AND",
    "OPERATOR_OR",
    "RawGrid",
    "Record",
]
