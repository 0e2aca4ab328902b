#!/usr/bin/env python3
"""Store Model Demo Driver

Runs a random workload against the store model and samples its capacity
to a CSV file. With --self-check the workload also goes through a
differential checker against a second model.

Usage:
    python demo/model_demo_driver.py --operations 10000 --seed 7
    python demo/model_demo_driver.py --page-size 4096 --num-pages 20 --self-check
"""

from __future__ import annotations

import argparse
import csv
import logging
import random
from collections import defaultdict

from store_model.components.checker import DifferentialChecker
from store_model.components.generator import OperationGenerator
from store_model.core.config import StoreFormat
from store_model.core.errors import InvalidArgumentError, NoCapacityError
from store_model.core.model import StoreModel
from store_model.core.types import Clear, Prepare, Transaction


def run_demo(args: argparse.Namespace) -> None:
    """Run the demo workload and collect capacity samples."""
    fmt = build_format(args)
    model = StoreModel(fmt)
    rng = random.Random(args.seed)
    generator = OperationGenerator(
        fmt,
        rng=rng,
        key_space=args.key_space_size,
        invalid_rate=args.invalid_rate,
        duplicate_rate=args.duplicate_rate,
    )
    checker = DifferentialChecker(model, StoreModel(fmt)) if args.self_check else None

    counters = defaultdict(int)

    print(f"Starting store model demo for {args.operations} operations...")
    print(
        f"Format: capacity={fmt.total_capacity} words, max_key={fmt.max_key}, "
        f"max_value_len={fmt.max_value_len}, max_updates={fmt.max_updates}"
    )
    print(f"Output: {args.out_csv}")

    with open(args.out_csv, "w", newline="") as f:
        w = csv.writer(f)
        w.writerow(["op", "kind", "outcome", "entries", "used", "remaining"])

        for i in range(args.operations):
            operation = generator.next_operation(model)
            kind = operation_kind(operation)
            if checker is not None:
                error = checker.apply(operation)
                outcome = "ok" if error is None else error.__name__
            else:
                outcome = apply_one(model, operation)

            counters[kind] += 1
            counters[outcome] += 1

            if i % args.sample_every == 0:
                ratio = model.capacity()
                w.writerow([i, kind, outcome, len(model), ratio.used, ratio.remaining])

            if (i + 1) % 1000 == 0:
                print(f"  {i + 1} / {args.operations}")

    print("Demo complete.")
    for name in sorted(counters):
        print(f"  {name}: {counters[name]}")
    print(f"Final state: {model!r}")


def build_format(args: argparse.Namespace) -> StoreFormat:
    """Build the store format from page geometry or explicit limits."""
    if args.page_size is not None:
        return StoreFormat.from_geometry(args.page_size, args.num_pages)
    return StoreFormat(
        total_capacity=args.total_capacity,
        max_key=args.max_key,
        max_value_len=args.max_value_len,
        max_updates=args.max_updates,
    )


def apply_one(model: StoreModel, operation) -> str:
    """Apply an operation and return its outcome name."""
    try:
        model.apply(operation)
    except InvalidArgumentError:
        return "InvalidArgumentError"
    except NoCapacityError:
        return "NoCapacityError"
    return "ok"


def operation_kind(operation) -> str:
    if isinstance(operation, Transaction):
        return f"transaction_{min(len(operation.updates), 2)}"
    if isinstance(operation, Clear):
        return "clear"
    if isinstance(operation, Prepare):
        return "prepare"
    raise TypeError(f"Unknown store operation: {operation!r}")


def main() -> None:
    """Parse arguments and run demo."""
    p = argparse.ArgumentParser(description="Store model demo driver")

    # Format configuration
    p.add_argument("--page-size", type=int, default=None, help="Flash page size in bytes")
    p.add_argument("--num-pages", type=int, default=20, help="Number of flash pages")
    p.add_argument("--total-capacity", type=int, default=256, help="Capacity in words")
    p.add_argument("--max-key", type=int, default=4095, help="Largest valid key")
    p.add_argument("--max-value-len", type=int, default=64, help="Largest value in bytes")
    p.add_argument("--max-updates", type=int, default=8, help="Largest transaction")

    # Workload configuration
    p.add_argument("--operations", type=int, default=10_000, help="Number of operations")
    p.add_argument("--seed", type=int, default=None, help="Random seed")
    p.add_argument("--key-space-size", type=int, default=32, help="Number of distinct keys")
    p.add_argument(
        "--invalid-rate", type=float, default=0.05, help="Probability of out-of-range arguments"
    )
    p.add_argument(
        "--duplicate-rate", type=float, default=0.05, help="Probability of duplicate keys"
    )
    p.add_argument(
        "--self-check",
        action="store_true",
        help="Check the model against a second model through the differential checker",
    )

    # Sampling configuration
    p.add_argument("--sample-every", type=int, default=10, help="Sampling interval in operations")
    p.add_argument("--out-csv", default="/tmp/store_model_capacity.csv", help="Output CSV file")
    p.add_argument("--log-level", default="WARNING", help="Logging level")

    args = p.parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    run_demo(args)


if __name__ == "__main__":
    main()
