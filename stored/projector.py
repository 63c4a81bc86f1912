"""Projection of store state onto flat component props.

A component declares which fields it reads from which top-level slice of the
store state (its field map). Only those fields ever reach the component:

    field_map = {"cart": ["items", "total"], "user": ["name"]}
    project(field_map, state) -> {"items": ..., "total": ..., "name": ...}

A slice missing from the state is logged and skipped. When two slices declare
the same field name the later slice in iteration order wins.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from .logger import get_logger
from .metrics import metrics

_logger = get_logger("projector")

FieldMap = Mapping[str, Sequence[str]]


def _read_field(slice_value: Any, field: str) -> Any:
    if isinstance(slice_value, Mapping):
        return slice_value.get(field)
    return getattr(slice_value, field, None)


def project(
    field_map: FieldMap | None,
    state: Any,
    *,
    warn_on_collision: bool = False,
    missing_level: int = logging.ERROR,
) -> dict[str, Any]:
    props: dict[str, Any] = {}
    if not field_map:
        return props

    owners: dict[str, str] = {}
    for slice_name, fields in field_map.items():
        if not isinstance(state, Mapping) or slice_name not in state:
            metrics.inc("projector.missing_slice")
            _logger.log(
                missing_level,
                'Unable to find "%s" in the state. Please check the reducer or the store.',
                slice_name,
            )
            continue

        if isinstance(fields, str):
            _logger.log(
                missing_level,
                'fields for "%s" should be a list of names, got the string "%s"; reading it as one field',
                slice_name,
                fields,
            )
            fields = [fields]

        slice_value = state[slice_name]
        for field in fields:
            if warn_on_collision and field in owners and owners[field] != slice_name:
                _logger.warning(
                    'field "%s" from slice "%s" overrides the one from slice "%s"',
                    field,
                    slice_name,
                    owners[field],
                )
            props[field] = _read_field(slice_value, field)
            owners[field] = slice_name

    return props
