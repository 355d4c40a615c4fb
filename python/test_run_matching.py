"""Unit tests for the DIMACS command-line driver."""

import contextlib
import io
import logging
import os.path
import tempfile
import unittest
from unittest.mock import patch

import run_matching
from mcmatching import InvalidGraphError


class TestReadDimacsGraph(unittest.TestCase):
    """Test reading graphs in DIMACS format."""

    def test_graph(self):
        f = io.StringIO("c test graph\n"
                        "p edge 5 2\n"
                        "\n"
                        "e 1 2 5\n"
                        "e 2 3\n")
        graph = run_matching.read_dimacs_graph(f)
        self.assertEqual(graph.num_vertex, 5)
        self.assertEqual(graph.edges(), [(0,1), (1,2)])

    def test_no_problem_line(self):
        f = io.StringIO("e 1 3 2.5\n")
        graph = run_matching.read_dimacs_graph(f)
        self.assertEqual(graph.num_vertex, 3)
        self.assertEqual(graph.edges(), [(0,2)])

    def test_fail_bad_lines(self):
        for data in ("x 1 2\n",
                     "e 0 1\n",
                     "e 1\n",
                     "e 1 2 abc\n",
                     "p matching 2 1\n",
                     "p edge 2 1\np edge 2 1\n"):
            with self.assertRaises(ValueError):
                run_matching.read_dimacs_graph(io.StringIO(data))

    def test_fail_too_few_vertices(self):
        f = io.StringIO("p edge 2 1\ne 1 3\n")
        with self.assertRaises(InvalidGraphError):
            run_matching.read_dimacs_graph(f)


class TestDimacsMatching(unittest.TestCase):
    """Test reading and writing matchings in DIMACS format."""

    def test_write(self):
        f = io.StringIO()
        run_matching.write_dimacs_matching(f, [(0,1), (2,4)])
        self.assertEqual(f.getvalue(), "s 2\nm 1 2\nm 3 5\n")

    def test_read(self):
        f = io.StringIO("c solution\ns 2\nm 1 2\nm 3 5\n")
        (size, pairs) = run_matching.read_dimacs_matching(f)
        self.assertEqual(size, 2)
        self.assertEqual(pairs, [(0,1), (2,4)])

    def test_fail_missing_solution(self):
        with self.assertRaises(ValueError):
            run_matching.read_dimacs_matching(io.StringIO("m 1 2\n"))
        with self.assertRaises(ValueError):
            run_matching.read_dimacs_matching(io.StringIO("s 1\ns 1\n"))


class TestGenerateMatching(unittest.TestCase):
    """Test processing of graph files."""

    def test_generate_and_verify(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            input_filename = os.path.join(tmpdir, "cycle.edge")
            output_filename = os.path.join(tmpdir, "cycle.out")
            with open(input_filename, "w", encoding="ascii") as f:
                f.write("p edge 6 5\n")
                for x in range(1, 6):
                    f.write(f"e {x} {x % 5 + 1}\n")

            run_matching.generate_matching(input_filename, output_filename)

            (size, pairs) = run_matching.read_dimacs_matching_file(
                output_filename)
            self.assertEqual(size, 2)
            self.assertEqual(len(pairs), 2)

            self.assertTrue(run_matching.verify_matching(input_filename))


class TestMain(unittest.TestCase):
    """Test the command-line entry point."""

    def _run_main(self, *args):
        stdout = io.StringIO()
        stderr = io.StringIO()
        with patch("sys.argv", ["run_matching.py"] + list(args)), \
                patch("logging.basicConfig") as basic_config, \
                contextlib.redirect_stdout(stdout), \
                contextlib.redirect_stderr(stderr):
            status = run_matching.main()
        return (status, stdout.getvalue(), stderr.getvalue(), basic_config)

    def _write_cycle(self, tmpdir):
        input_filename = os.path.join(tmpdir, "cycle.edge")
        with open(input_filename, "w", encoding="ascii") as f:
            f.write("p edge 5 5\n")
            for x in range(1, 6):
                f.write(f"e {x} {x % 5 + 1}\n")
        return input_filename

    def test_generate_and_verify(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            input_filename = self._write_cycle(tmpdir)

            (status, _out, _err, basic_config) = self._run_main(
                "--verbose", "--outdir", tmpdir, input_filename)
            self.assertEqual(status, 0)
            self.assertEqual(
                basic_config.call_args.kwargs["level"], logging.DEBUG)
            self.assertTrue(
                os.path.exists(os.path.join(tmpdir, "cycle.out")))

            (status, out, _err, basic_config) = self._run_main(
                "--verify", input_filename)
            self.assertEqual(status, 0)
            self.assertIn("All tests passed", out)
            self.assertEqual(
                basic_config.call_args.kwargs["level"], logging.WARNING)

    def test_verify_wrong_size(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            input_filename = self._write_cycle(tmpdir)
            with open(os.path.join(tmpdir, "cycle.out"),
                      "w", encoding="ascii") as f:
                f.write("s 3\n")

            (status, out, _err, _basic_config) = self._run_main(
                "--verify", input_filename)
            self.assertEqual(status, 1)
            self.assertIn("FAILED", out)
            self.assertIn("1 tests failed", out)

    def test_missing_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            input_filename = os.path.join(tmpdir, "missing.edge")
            (status, _out, err, _basic_config) = self._run_main(
                "--outdir", tmpdir, input_filename)
            self.assertEqual(status, 1)
            self.assertIn("ERROR:", err)


if __name__ == "__main__":
    unittest.main()
