"""Type aliases shared across the cvp-inventory package."""

from typing import TypeAlias

from pydantic import JsonValue

JsonDict: TypeAlias = dict[str, JsonValue]
QueryParams: TypeAlias = dict[str, str]

__all__ = ["JsonDict", "QueryParams"]
