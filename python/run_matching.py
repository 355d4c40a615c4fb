#!/usr/bin/env python3

"""
Calculate maximum cardinality matching of graphs in DIMACS format.
"""

from __future__ import annotations

import sys
import argparse
import logging
import os
import os.path
from typing import Optional, TextIO

from mcmatching import Graph, Matching


def parse_int_or_float(s: str) -> int|float:
    """Convert a string to integer or float value."""
    try:
        return int(s)
    except ValueError:
        pass
    return float(s)


def read_dimacs_graph(f: TextIO) -> Graph:
    """Read a graph in DIMACS edge list format.

    Edge weights are optional. If present, they are checked for
    valid syntax but otherwise ignored.
    """

    num_vertex: Optional[int] = None
    edges: list[tuple[int, int]] = []

    for line in f:
        s = line.strip()
        words = s.split()

        if not words:
            # Skip empty line.
            continue

        if words[0].startswith("c"):
            # Skip comment line.
            pass

        elif words[0] == "p":
            # Handle "problem" line.
            if len(words) != 4:
                raise ValueError(
                    f"Expecting DIMACS edge format but got {s!r}")
            if words[1] != "edge":
                raise ValueError(
                    f"Expecting DIMACS edge format but got {words[1]!r}")
            if num_vertex is not None:
                raise ValueError("Duplicate problem line")
            num_vertex = int(words[2])
            if num_vertex < 0:
                raise ValueError(f"Invalid number of vertices {s!r}")

        elif words[0] == "e":
            # Handle "edge" line.
            if len(words) not in (3, 4):
                raise ValueError(f"Expecting edge but got {s!r}")
            x = int(words[1])
            y = int(words[2])
            if (x < 1) or (y < 1):
                raise ValueError(f"Invalid vertex index {s!r}")
            if len(words) == 4:
                parse_int_or_float(words[3])
            edges.append((x - 1, y - 1))

        else:
            raise ValueError(f"Unknown line type {words[0]!r}")

    return Graph.from_edges(edges, num_vertex)


def read_dimacs_graph_file(filename: str) -> Graph:
    """Read a graph from file or stdin."""
    if filename:
        with open(filename, "r", encoding="ascii") as f:
            try:
                return read_dimacs_graph(f)
            except ValueError as exc:
                raise ValueError(f"{exc} in {filename!r}") from None
    else:
        try:
            return read_dimacs_graph(sys.stdin)
        except ValueError as exc:
            raise ValueError(f"{exc} in (stdin)") from None


def read_dimacs_matching(f: TextIO) -> tuple[int, list[tuple[int, int]]]:
    """Read a matching solution in DIMACS format.

    Returns:
        Tuple (cardinality, pairs).
    """

    have_size = False
    size = 0
    pairs: list[tuple[int, int]] = []

    for line in f:
        s = line.strip()
        words = s.split()

        if not words:
            # Skip empty line.
            continue

        if words[0].startswith("c"):
            # Skip comment line.
            pass

        elif words[0] == "s":
            # Handle "solution" line.
            if len(words) != 2:
                raise ValueError(
                    f"Expecting solution line but got {s!r}")
            if have_size:
                raise ValueError("Duplicate solution line")
            have_size = True
            size = int(words[1])

        elif words[0] == "m":
            # Handle "matching" line.
            if len(words) != 3:
                raise ValueError(
                    f"Expecting matched edge but got {s!r}")
            x = int(words[1])
            y = int(words[2])
            if (x < 1) or (y < 1):
                raise ValueError(f"Invalid vertex index {s!r}")
            pairs.append((x - 1, y - 1))

        else:
            raise ValueError(f"Unknown line type {words[0]!r}")

    if not have_size:
        raise ValueError("Missing solution line")

    return (size, pairs)


def read_dimacs_matching_file(
        filename: str
        ) -> tuple[int, list[tuple[int, int]]]:
    """Read a matching from file."""
    with open(filename, "r", encoding="ascii") as f:
        try:
            return read_dimacs_matching(f)
        except ValueError as exc:
            raise ValueError(f"{exc} in {filename!r}") from None


def write_dimacs_matching(f: TextIO, pairs: list[tuple[int, int]]) -> None:
    """Write a matching solution in DIMACS format.

    The solution line holds the number of matched edges.
    """

    print("s", len(pairs), file=f)

    for (x, y) in pairs:
        print("m", x + 1, y + 1, file=f)


def write_dimacs_matching_file(
        filename: str,
        pairs: list[tuple[int, int]]
        ) -> None:
    """Write a matching to file or stdout."""
    if filename:
        with open(filename, "x", encoding="ascii") as f:
            write_dimacs_matching(f, pairs)
    else:
        write_dimacs_matching(sys.stdout, pairs)


def generate_matching(input_filename: str, output_filename: str) -> None:
    """Calculate matching of one graph instance."""

    graph = read_dimacs_graph_file(input_filename)
    matching = Matching(graph)
    write_dimacs_matching_file(output_filename, matching.pairs())


def run_generate(filenames: list[str], outdir: Optional[str]) -> int:
    """Calculate matching(s) and write output to disk or stdout."""

    if len(filenames) == 0:
        # Read from stdin; write to stdout.
        generate_matching("", "")

    elif not outdir:
        # Read from file, write to stdout.
        assert len(filenames) == 1
        generate_matching(filenames[0], "")

    else:
        # Read from file, write to file.
        for filename in filenames:
            output_filename = os.path.join(
                outdir,
                os.path.splitext(os.path.basename(filename))[0] + ".out")
            print(f"Processing {filename!r} -> {output_filename!r} ...",
                  end=" ")
            sys.stdout.flush()

            generate_matching(filename, output_filename)

            print(" OK")
            sys.stdout.flush()

    return 0


def verify_matching(filename: str) -> bool:
    """Verify matching of one graph instance.

    The matching is compared against the solution in the file with
    the same name and extension ".out".
    """

    print("Verifying", repr(filename), "...", end=" ")
    sys.stdout.flush()

    matching_filename = os.path.splitext(filename)[0] + ".out"

    graph = read_dimacs_graph_file(filename)
    (gold_size, _gold_pairs) = read_dimacs_matching_file(matching_filename)

    matching = Matching(graph)

    if len(matching) != gold_size:
        print("FAILED",
              f"(got {len(matching)} pairs, expected {gold_size})")
        return False

    print("OK")
    return True


def run_verify(filenames: list[str]) -> int:
    """Verify matching(s)."""

    num_passed = 0
    failed_tests: list[str] = []

    for filename in filenames:
        if verify_matching(filename):
            num_passed += 1
        else:
            failed_tests.append(filename)
        sys.stdout.flush()

    print("done.")
    print(num_passed, "tests passed")
    if failed_tests:
        print(len(failed_tests), "tests failed:")
        for filename in failed_tests:
            print("   ", filename, "FAILED")
    else:
        print("All tests passed")
    sys.stdout.flush()

    return 1 if failed_tests else 0


def main() -> int:
    """Main program."""

    parser = argparse.ArgumentParser()
    parser.description = (
        "Calculate maximum cardinality matching of graphs in DIMACS format.")

    parser.add_argument("--verify",
                        action="store_true",
                        help="verify existing output file(s)")
    parser.add_argument("--verbose",
                        action="store_true",
                        help="print debug messages to stderr")
    parser.add_argument("--outdir",
                        action="store",
                        type=str,
                        help="directory to write output")
    parser.add_argument("input",
                        nargs="*",
                        help="input file(s); leave empty to read from stdin")

    args = parser.parse_args()

    logging.basicConfig(
        level=(logging.DEBUG if args.verbose else logging.WARNING),
        format="%(name)s: %(message)s")

    if (not args.input) and os.isatty(sys.stdin.fileno()):
        print("ERROR: Expecting input from stdin but stdin is a terminal",
              file=sys.stderr)
        print(file=sys.stderr)
        parser.print_help(sys.stderr)
        return 1

    if (not args.input) and args.verify:
        print("ERROR: Can not verify when reading from stdin",
              file=sys.stderr)
        return 1

    if len(args.input) > 1 and (not args.verify) and (not args.outdir):
        print("ERROR: Need --outdir or --verify to process multiple inputs",
              file=sys.stderr)
        return 1

    try:
        if args.verify:
            return run_verify(args.input)
        else:
            return run_generate(args.input, args.outdir)
    except (OSError, ValueError) as exc:
        print("ERROR:", exc, file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
