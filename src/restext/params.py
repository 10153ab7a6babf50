# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Request parameters from plain objects.

Each type declares, once, which attributes are sent and under which external
name::

    @param_mapping(("user_id", "uid"), ("is_active", "active"))
    @dataclass
    class UserFilter:
        user_id: int | None = None
        is_active: bool | None = None

``add_params_from_object(request, UserFilter(7, True))`` then adds
``uid=7`` and ``active=1``.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, TypeVar

from .http.models import HttpRequest

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_MAPPING_ATTR = "__param_mapping__"

_T = TypeVar("_T", bound=type)


@dataclass(frozen=True)
class ParamField:
    attr: str
    name: str


ParamMapping = tuple[ParamField, ...]


def _to_fields(fields: Iterable[ParamField | tuple[str, str]]) -> ParamMapping:
    out: list[ParamField] = []
    for item in fields:
        out.append(item if isinstance(item, ParamField) else ParamField(*item))
    return tuple(out)


def param_mapping(*fields: ParamField | tuple[str, str]):
    """Class decorator attaching an ordered (attribute, external name) mapping."""
    mapping = _to_fields(fields)

    def decorate(cls: _T) -> _T:
        setattr(cls, _MAPPING_ATTR, mapping)
        return cls

    return decorate


def get_param_mapping(obj: Any) -> ParamMapping | None:
    mapping = getattr(type(obj), _MAPPING_ATTR, None)
    return mapping if isinstance(mapping, tuple) else None


def normalize_param_value(value: Any) -> Any:
    """Convert a value to the form the server expects."""
    if isinstance(value, bool):
        return 1 if value else 0
    if isinstance(value, datetime):
        return value.strftime(DATE_FORMAT)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day).strftime(DATE_FORMAT)
    if isinstance(value, Enum):
        return int(value) if isinstance(value, int) else value.value
    return value


def params_from_object(
    obj: Any,
    mapping: Iterable[ParamField | tuple[str, str]] | None = None,
) -> list[tuple[str, Any]]:
    """Return the normalized (name, value) pairs for ``obj``, skipping None values."""
    fields = _to_fields(mapping) if mapping is not None else get_param_mapping(obj)
    if fields is None:
        raise TypeError(f"{type(obj).__name__} has no parameter mapping; decorate it with @param_mapping")

    params: list[tuple[str, Any]] = []
    for item in fields:
        value = getattr(obj, item.attr)
        if value is None:
            continue
        params.append((item.name, normalize_param_value(value)))
    return params


def add_params_from_object(
    request: HttpRequest,
    obj: Any,
    mapping: Iterable[ParamField | tuple[str, str]] | None = None,
) -> HttpRequest:
    """Add every mapped, non-None attribute of ``obj`` to ``request``."""
    for name, value in params_from_object(obj, mapping):
        request.add_param(name, value)
    return request


__all__ = [
    "DATE_FORMAT",
    "ParamField",
    "add_params_from_object",
    "get_param_mapping",
    "normalize_param_value",
    "param_mapping",
    "params_from_object",
]
