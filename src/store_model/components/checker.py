"""Differential checker comparing a store driver against the model.

Applies every operation to both sides and compares outcomes, content and
logical capacity after each step.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from ..core.errors import InvalidArgumentError, ModelMismatchError, NoCapacityError
from ..core.model import StoreModel
from ..core.types import StoreOperation
from ..interfaces.driver import StoreDriver

logger = logging.getLogger(__name__)

# Outcome of an operation: None on success, else the error class raised.
Outcome = type[InvalidArgumentError] | type[NoCapacityError] | None


@dataclass
class CheckReport:
    """Counters of operation outcomes over a checked run."""

    operations: int = 0
    successes: int = 0
    invalid_arguments: int = 0
    no_capacity: int = 0

    def record(self, outcome: Outcome) -> None:
        self.operations += 1
        if outcome is None:
            self.successes += 1
        elif outcome is InvalidArgumentError:
            self.invalid_arguments += 1
        else:
            self.no_capacity += 1


class DifferentialChecker:
    """Runs operations against a model and a driver in lockstep.

    Args:
        model: Model predicting the driver's behavior
        driver: Store under test

    Invariants:
        - Both sides see the same operations in the same order
        - After every operation, outcome, content and used capacity agree
        - A failed operation leaves the model unchanged
    """

    def __init__(self, model: StoreModel, driver: StoreDriver):
        self.model = model
        self.driver = driver
        self.report = CheckReport()

    def apply(self, operation: StoreOperation) -> Outcome:
        """Apply an operation to both sides and check they agree.

        Raises:
            ModelMismatchError: The driver diverged from the model.
        """
        before = dict(self.model.content())
        expected = _outcome(self.model.apply, operation)
        actual = _outcome(self.driver.apply, operation)

        if expected is not None and dict(self.model.content()) != before:
            raise ModelMismatchError("Model changed on a failed operation", operation)
        if expected is not actual:
            raise ModelMismatchError(
                f"Outcome mismatch: model {_name(expected)}, driver {_name(actual)}", operation
            )
        self.check(operation)

        self.report.record(expected)
        logger.debug(f"Checked {operation!r}: {_name(expected)}")
        return expected

    def check(self, operation: StoreOperation | None = None) -> None:
        """Compare the driver's content and capacity with the model's."""
        expected_content = dict(self.model.content())
        actual_content = dict(self.driver.content())
        if expected_content != actual_content:
            missing = sorted(expected_content.keys() - actual_content.keys())
            extra = sorted(actual_content.keys() - expected_content.keys())
            raise ModelMismatchError(
                f"Content mismatch: missing keys {missing}, extra keys {extra}", operation
            )

        expected_capacity = self.model.capacity()
        actual_capacity = self.driver.capacity()
        if expected_capacity != actual_capacity:
            raise ModelMismatchError(
                f"Capacity mismatch: model {expected_capacity}, driver {actual_capacity}", operation
            )

    def run(self, operations: Iterable[StoreOperation]) -> CheckReport:
        """Apply a sequence of operations and return the accumulated report."""
        for operation in operations:
            self.apply(operation)
        logger.info(
            f"Checked {self.report.operations} operations: {self.report.successes} ok, "
            f"{self.report.invalid_arguments} invalid, {self.report.no_capacity} no capacity"
        )
        return self.report


def _outcome(apply: Callable[[StoreOperation], None], operation: StoreOperation) -> Outcome:
    try:
        apply(operation)
    except InvalidArgumentError:
        return InvalidArgumentError
    except NoCapacityError:
        return NoCapacityError
    return None


def _name(outcome: Outcome) -> str:
    return "success" if outcome is None else outcome.__name__
