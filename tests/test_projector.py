from __future__ import annotations

import logging
from dataclasses import dataclass

from stored.metrics import metrics
from stored.projector import project

STATE = {
    "cart": {"items": [1, 2], "total": 2, "coupon": "X"},
    "user": {"name": "ada", "total": 99},
}


def test_only_declared_fields_are_projected():
    props = project({"cart": ["items", "total"]}, STATE)

    assert props == {"items": [1, 2], "total": 2}
    assert "coupon" not in props
    assert "cart" not in props


def test_projection_is_deterministic():
    field_map = {"cart": ["items"], "user": ["name"]}

    first = project(field_map, STATE)
    second = project(field_map, STATE)

    assert first == second == {"items": [1, 2], "name": "ada"}


def test_missing_slice_is_logged_and_skipped(stored_caplog):
    metrics.reset()

    props = project({"cart": ["items"], "orders": ["open"], "user": ["name"]}, STATE)

    assert props == {"items": [1, 2], "name": "ada"}
    errors = [r for r in stored_caplog.records if r.levelno == logging.ERROR]
    assert len(errors) == 1
    assert 'Unable to find "orders" in the state' in errors[0].getMessage()
    assert metrics.count("projector.missing_slice") == 1


def test_missing_slice_level_is_configurable(stored_caplog):
    project({"orders": ["open"]}, STATE, missing_level=logging.WARNING)

    assert [r.levelno for r in stored_caplog.records if "orders" in r.getMessage()] == [logging.WARNING]


def test_non_mapping_state_projects_nothing(stored_caplog):
    assert project({"cart": ["items"]}, None) == {}
    assert any("cart" in r.getMessage() for r in stored_caplog.records)


def test_later_slice_wins_on_field_collision(stored_caplog):
    props = project({"cart": ["total"], "user": ["total"]}, STATE)
    assert props == {"total": 99}

    props = project({"user": ["total"], "cart": ["total"]}, STATE)
    assert props == {"total": 2}

    assert not [r for r in stored_caplog.records if r.levelno >= logging.WARNING]


def test_field_collision_warning_when_enabled(stored_caplog):
    props = project({"cart": ["total"], "user": ["total"]}, STATE, warn_on_collision=True)

    assert props == {"total": 99}
    warnings = [r.getMessage() for r in stored_caplog.records if r.levelno == logging.WARNING]
    assert warnings == ['field "total" from slice "user" overrides the one from slice "cart"']


def test_undeclared_field_in_present_slice_is_none():
    assert project({"cart": ["discount"]}, STATE) == {"discount": None}


def test_attribute_slices_are_read_with_getattr():
    @dataclass
    class Session:
        token: str
        expires: int

    state = {"session": Session(token="t", expires=10)}

    assert project({"session": ["token", "missing"]}, state) == {"token": "t", "missing": None}


def test_empty_field_map():
    assert project(None, STATE) == {}
    assert project({}, STATE) == {}


def test_bare_string_fields_read_as_one_field(stored_caplog):
    props = project({"cart": "items"}, STATE)

    assert props == {"items": [1, 2]}
    assert "i" not in props
    errors = [r for r in stored_caplog.records if r.levelno == logging.ERROR]
    assert len(errors) == 1
    assert 'fields for "cart" should be a list of names' in errors[0].getMessage()
