"""Tests for parameter resolution"""

from typing import Any

import pytest

from dofactory.exceptions import ServiceNotFoundError
from dofactory.naming import type_name
from dofactory.resolver import resolve
from dofactory.signature import validate


class Database:
    pass


class Cache:
    pass


class Notifier:
    pass


class Service:
    pass


class LookupFailed(Exception):
    pass


class RecordingContainer:
    """Container double that records every lookup"""

    def __init__(self, services: dict[str, Any], failing: set[str] | None = None):
        self.services = services
        self.failing = failing or set()
        self.lookups: list[str] = []

    def invoke_named(self, name: str) -> Any:
        self.lookups.append(name)
        if name in self.failing:
            raise LookupFailed(name)
        if name not in self.services:
            raise ServiceNotFoundError(name, sorted(self.services))
        return self.services[name]


def build_service(db: Database, cache: Cache, notifier: Notifier) -> Service:
    return Service()


DB, CACHE, NOTIFIER = type_name(Database), type_name(Cache), type_name(Notifier)


def test_lookups_run_left_to_right():
    """Each parameter is looked up once, in declaration order"""
    db, cache, notifier = Database(), Cache(), Notifier()
    container = RecordingContainer({DB: db, CACHE: cache, NOTIFIER: notifier})

    args, kwargs = resolve(validate(build_service, Service), container)

    assert container.lookups == [DB, CACHE, NOTIFIER]
    assert args == [db, cache, notifier]
    assert args[0] is db
    assert kwargs == {}


def test_first_failure_stops_resolution():
    """Later parameters are not looked up after a failing lookup"""
    container = RecordingContainer({DB: Database(), NOTIFIER: Notifier()})

    with pytest.raises(ServiceNotFoundError) as exc_info:
        resolve(validate(build_service, Service), container)

    assert container.lookups == [DB, CACHE]
    assert exc_info.value.name == CACHE


def test_lookup_error_propagates_unchanged():
    container = RecordingContainer({}, failing={DB})

    with pytest.raises(LookupFailed) as exc_info:
        resolve(validate(build_service, Service), container)

    assert exc_info.value.args == (DB,)
    assert container.lookups == [DB]


def test_none_becomes_zero_value_of_parameter_type():
    def build(db: Database | None, retries: int, name: str) -> Service:
        return Service()

    container = RecordingContainer(
        {f"{DB} | None": None, "int": None, "str": None}
    )

    args, _ = resolve(validate(build, Service), container)

    assert args == [None, 0, ""]


def test_keyword_only_parameters_are_passed_by_name():
    def build(db: Database, *, retries: int) -> Service:
        return Service()

    db = Database()
    container = RecordingContainer({DB: db, "int": 3})

    args, kwargs = resolve(validate(build, Service), container)

    assert args == [db]
    assert kwargs == {"retries": 3}


def test_no_parameters_means_no_lookups():
    def build() -> Service:
        return Service()

    container = RecordingContainer({})

    assert resolve(validate(build, Service), container) == ([], {})
    assert container.lookups == []
