"""Criteria shared by every device listing and the query-string parser feeding it.

Only one ``filter[<field>]`` pair survives parsing: when several are present the
first one seen is kept. ``limit`` and ``offset`` follow integer-prefix parsing and
turn into ``nan`` when the string has no leading digits, so callers validate them
before use (see :func:`validate_pagination`).
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from .exceptions import DeviceValidationError

logger = logging.getLogger(__name__)

Number = Union[int, float]

_FILTER_KEY = re.compile(r"^filter\[(.+?)\]$")
_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")


@dataclass(slots=True)
class FilterQuery:
    field: str
    value: Any


@dataclass(slots=True)
class SortQuery:
    field: str
    is_ascending: bool = True


@dataclass(slots=True)
class DeviceCriteria:
    filter_by: Optional[FilterQuery] = None
    sort_by: Optional[SortQuery] = None
    search: Optional[str] = None
    limit: Optional[Number] = None
    offset: Optional[Number] = None


def parse_criteria(query_params: Mapping[str, Any]) -> DeviceCriteria:
    """Build a :class:`DeviceCriteria` from flat query parameters. Never raises."""
    criteria = DeviceCriteria()

    for key, value in query_params.items():
        match = _FILTER_KEY.match(key)
        if match:
            if criteria.filter_by is None:
                criteria.filter_by = FilterQuery(field=match.group(1), value=value)
            else:
                logger.warning("Only one filter is supported; dropping %s", key)
            continue

        if not isinstance(value, str):
            continue

        if key == "sort":
            is_descending = value.startswith("-")
            criteria.sort_by = SortQuery(
                field=value[1:] if is_descending else value,
                is_ascending=not is_descending,
            )
        elif key == "limit":
            criteria.limit = _parse_int(value)
        elif key == "offset":
            criteria.offset = _parse_int(value)
        elif key == "search":
            criteria.search = value

    return criteria


def validate_pagination(criteria: DeviceCriteria) -> None:
    """Reject pagination values a store cannot honour."""
    for name in ("limit", "offset"):
        value = getattr(criteria, name)
        if value is None:
            continue
        if isinstance(value, float) and math.isnan(value):
            raise DeviceValidationError(
                f"{name} must be an integer",
                [{"loc": [name], "msg": "not a number"}],
            )
        if value < 0:
            raise DeviceValidationError(
                f"{name} must not be negative",
                [{"loc": [name], "msg": "negative value"}],
            )


def _parse_int(raw: str) -> Number:
    match = _INT_PREFIX.match(raw)
    if match is None:
        return math.nan
    return int(match.group(1), 10)
