"""Unit tests for the differential checker."""

import random

import pytest

from store_model.components.checker import CheckReport, DifferentialChecker
from store_model.components.generator import OperationGenerator
from store_model.core.config import StoreFormat
from store_model.core.errors import InvalidArgumentError, ModelMismatchError, NoCapacityError
from store_model.core.model import StoreModel
from store_model.core.types import Clear, Insert, Prepare, Remove, StoreRatio, Transaction


class IgnoresClearDriver(StoreModel):
    """Driver that silently drops clear operations."""

    def apply(self, operation):
        if isinstance(operation, Clear):
            return
        super().apply(operation)


class OptimisticPrepareDriver(StoreModel):
    """Driver that accepts every prepare."""

    def apply(self, operation):
        if isinstance(operation, Prepare):
            return
        super().apply(operation)


class OverReportingDriver(StoreModel):
    """Driver that reports one word more than it uses."""

    def capacity(self):
        ratio = super().capacity()
        return StoreRatio(used=ratio.used + 1, total=ratio.total)


@pytest.fixture
def fmt():
    """Create a small store format for tests."""
    return StoreFormat(total_capacity=10, max_key=100, max_value_len=8, max_updates=4)


@pytest.fixture
def model(fmt):
    return StoreModel(fmt)


def test_agreeing_driver(model, fmt):
    """Test that a faithful driver passes the check."""
    checker = DifferentialChecker(model, StoreModel(fmt))

    assert checker.apply(Transaction([Insert(1, b"abcd")])) is None
    assert checker.apply(Transaction([Insert(2, b"a"), Insert(2, b"b")])) is InvalidArgumentError
    assert checker.apply(Prepare(9)) is NoCapacityError
    assert checker.apply(Clear(0)) is None

    assert checker.report == CheckReport(
        operations=4, successes=2, invalid_arguments=1, no_capacity=1
    )


def test_random_run_against_copy(model):
    """Test a long random run against an identical model."""
    driver = model.copy()
    checker = DifferentialChecker(model, driver)
    generator = OperationGenerator(model.format(), rng=random.Random(1234), invalid_rate=0.1)

    for _ in range(500):
        checker.apply(generator.next_operation(model))

    report = checker.report
    assert report.operations == 500
    assert report.successes + report.invalid_arguments + report.no_capacity == 500
    assert report.successes > 0
    assert report.invalid_arguments > 0


def test_run_returns_report(model, fmt):
    """Test that run applies a whole sequence."""
    checker = DifferentialChecker(model, StoreModel(fmt))
    report = checker.run([Transaction([Insert(k, b"v")]) for k in range(3)] + [Clear(1)])

    assert report.operations == 4
    assert report.successes == 4
    assert dict(model.content()) == {0: b"v"}


def test_content_mismatch_detected(model, fmt):
    """Test that a driver ignoring clears is caught."""
    checker = DifferentialChecker(model, IgnoresClearDriver(fmt))
    checker.apply(Transaction([Insert(5, b"v")]))

    operation = Clear(0)
    with pytest.raises(ModelMismatchError, match="Content mismatch") as exc_info:
        checker.apply(operation)
    assert exc_info.value.operation == operation


def test_outcome_mismatch_detected(model, fmt):
    """Test that a driver accepting impossible prepares is caught."""
    checker = DifferentialChecker(model, OptimisticPrepareDriver(fmt))

    checker.apply(Prepare(10))
    with pytest.raises(ModelMismatchError, match="Outcome mismatch"):
        checker.apply(Prepare(11))


def test_capacity_mismatch_detected(model, fmt):
    """Test that a driver reporting wrong capacity is caught."""
    checker = DifferentialChecker(model, OverReportingDriver(fmt))
    with pytest.raises(ModelMismatchError, match="Capacity mismatch"):
        checker.apply(Transaction([]))


def test_failed_operation_leaves_both_unchanged(model, fmt):
    """Test that rejected operations are no-ops on both sides."""
    driver = StoreModel(fmt)
    checker = DifferentialChecker(model, driver)
    checker.apply(Transaction([Insert(1, b"v")]))

    assert checker.apply(Transaction([Remove(1), Remove(1)])) is InvalidArgumentError
    assert dict(model.content()) == dict(driver.content()) == {1: b"v"}
