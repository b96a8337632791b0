"""Utilities for turning query parameters into equality filters."""

from __future__ import annotations

from typing import Any, Collection, Dict, Mapping

from bson import ObjectId


class FilterParamError(ValueError):
    """Raised when a filter query parameter is invalid."""


def _clean_string(value: Any) -> str:
    return str(value).strip() if value is not None else ""


def parse_filter_params(
    args: Mapping[str, str],
    *,
    allowed_fields: Collection[str],
    reference_fields: Collection[str] = (),
) -> Dict[str, Any]:
    """Build a MongoDB equality filter from a request args mapping.

    Unknown parameters are ignored. Reference fields must be object ids and
    are matched against the stored ObjectId.
    """

    filters: Dict[str, Any] = {}

    for field in allowed_fields:
        value = _clean_string(args.get(field))
        if not value:
            continue

        if field in reference_fields:
            if not ObjectId.is_valid(value):
                raise FilterParamError(f"{field} must be a valid object id.")
            filters[field] = ObjectId(value)
        else:
            filters[field] = value

    return filters


__all__ = ["FilterParamError", "parse_filter_params"]
