"""
Demonstrate the centered heap data structure.

Builds a test array, runs one of the centered heap sorts over it and prints a JSON line
with timing and, optionally, comparison and swap counts.

Usage:
    python -m cheap.cli --op merge --array shuffle --size 1000 --count-stats
    python -m cheap.cli --op run_left --run-size 16 --size 100
    python -m cheap.cli --size 4096 --plot counts.png
"""

import argparse
import json
import logging
import sys
import time

import matplotlib.pyplot as plt
import numpy as np

from cheap import sort
from cheap.stats import NullCounter, TallyCounter

logger = logging.getLogger(__name__)

OPS = ("merge", "heap_left", "heap_right", "run_left", "run_right", "sort")
ARRAYS = ("shuffle", "random", "count", "reverse")

# ops whose result is fully sorted
SORTING_OPS = ("merge", "heap_left", "heap_right", "sort")


def makeArray(kind, n, rng=None):
    """
    Construct a test array.
    :param kind: "shuffle" (0..n-1 permuted, no duplicates), "random" (n draws from 0..n-1, may repeat),
                 "count" (0..n-1) or "reverse" (n-1..0)
    :param n: number of elements
    :param rng: numpy Generator; a fresh one if not given
    :return: list of ints
    """
    if rng is None:
        rng = np.random.default_rng()
    if kind == "shuffle":
        a = rng.permutation(n)
    elif kind == "random":
        a = rng.integers(0, max(n, 1), size=n)
    elif kind == "count":
        a = np.arange(n)
    elif kind == "reverse":
        a = np.arange(n)[::-1]
    else:
        raise ValueError("Unknown array kind: " + str(kind))
    return a.tolist()


def runOp(op, a, runSize=16, counter=None, checked=False):
    """
    Apply an operation to a in place
    :param op: one of OPS; "sort" is the built-in list sort, for comparison
    :param runSize: window size for the running sorts
    """
    if op == "merge":
        sort.mergeSort(a, counter=counter, checked=checked)
    elif op == "heap_left":
        sort.heapSortLeft(a, counter=counter, checked=checked)
    elif op == "heap_right":
        sort.heapSortRight(a, counter=counter, checked=checked)
    elif op == "run_left":
        sort.runningSortLeft(a, runSize, counter=counter, checked=checked)
    elif op == "run_right":
        sort.runningSortRight(a, runSize, counter=counter, checked=checked)
    elif op == "sort":
        a.sort()
    else:
        raise ValueError("Unknown operation: " + str(op))


def report(op, kind, n, runSize=16, countStats=False, checked=False, rng=None):
    """
    Build an array, run op over it and collect the statistics
    :return: dict ready for JSON output
    """
    a = makeArray(kind, n, rng)
    out = {"op": op, "array": kind, "num_elems": n}
    counter = TallyCounter() if countStats else NullCounter()
    start = time.perf_counter()
    runOp(op, a, runSize, counter, checked)
    out["elapsed"] = time.perf_counter() - start
    counter.copyTo(out)
    if op in SORTING_OPS:
        out["is_sorted"] = sort.isSorted(a)
    return out


def sweep(ops, kind, maxSize, runSize=16, rng=None):
    """
    Tally comparisons and swaps for each op over sizes 16, 32, ... up to maxSize
    :return: list of report dicts
    """
    rows = []
    n = 16
    while n <= maxSize:
        for op in ops:
            if op == "sort":
                continue
            rows.append(report(op, kind, n, runSize, countStats=True, rng=rng))
        n *= 2
    return rows


def plotSweep(rows, filename):
    """
    Plot comparisons and swaps against array size, one line per op, and save the figure
    :param rows: output of sweep()
    :param filename: image file name
    """
    fig, (axc, axs) = plt.subplots(1, 2, figsize=(10, 4), dpi=100)
    for op in sorted(set(r["op"] for r in rows)):
        mine = [r for r in rows if r["op"] == op]
        sizes = [r["num_elems"] for r in mine]
        axc.plot(sizes, [r["compares"] for r in mine], marker="o", label=op)
        axs.plot(sizes, [r["swaps"] for r in mine], marker="o", label=op)
    for ax, title in ((axc, "compares"), (axs, "swaps")):
        ax.set_xscale("log", base=2)
        ax.set_xlabel("num_elems")
        ax.set_title(title)
        ax.legend()
    fig.tight_layout()
    fig.savefig(filename)
    plt.close(fig)


def buildParser():
    parser = argparse.ArgumentParser(
        prog="cheap",
        description="Demonstrate the centered heap data structure.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-o", "--op", choices=OPS, default="merge",
                        help="Operation to test centered heap. `merge` implements an in-place merge sort "
                             "using c-heap. `heap_*` performs a heap sort using c-heap from the left or right. "
                             "`run_*` sorts only a window of RUN_SIZE elements. `sort` uses the built-in list sort.")
    parser.add_argument("-a", "--array", choices=ARRAYS, default="shuffle",
                        help="Method to generate the test array. `shuffle` guarantees no duplicate values, "
                             "while `random` may have them. `count` counts from 0 to size - 1. "
                             "`reverse` is a count from size - 1 to 0.")
    parser.add_argument("-s", "--size", type=int, default=40, metavar="SIZE",
                        help="Size of the test array.")
    parser.add_argument("-r", "--run-size", type=int, default=16, metavar="RUN_SIZE",
                        help="Size of the window for a running sort.")
    parser.add_argument("-c", "--count-stats", action="store_true",
                        help="Count comparisons and swaps.")
    parser.add_argument("--check", action="store_true",
                        help="Verify heap invariants after every operation (slow).")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for the test array generator.")
    parser.add_argument("--plot", metavar="PATH", default=None,
                        help="Sweep sizes up to SIZE for every c-heap op and save a plot of the counts.")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log debug traces to stderr.")
    return parser


def main(argv=None):
    """Main CLI entry point."""
    args = buildParser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")
    if args.size < 0:
        print("Invalid usage: size must be non-negative", file=sys.stderr)
        return 2
    rng = np.random.default_rng(args.seed)

    if args.plot:
        rows = sweep(OPS, args.array, args.size, args.run_size, rng)
        plotSweep(rows, args.plot)
        logger.info("Saved sweep of %d runs to %s", len(rows), args.plot)
        print(json.dumps({"plot": args.plot, "runs": len(rows)}))
        return 0

    out = report(args.op, args.array, args.size, args.run_size, args.count_stats, args.check, rng)
    print(json.dumps(out))
    if out.get("is_sorted") is False:
        logger.error("%s left the array unsorted", args.op)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
