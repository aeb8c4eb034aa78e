import unittest
from cheap.cli import *
import contextlib
import io
import os
import tempfile


class MyTestCase(unittest.TestCase):

    def run_main(self, argv):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            status = main(argv)
        return status, json.loads(out.getvalue())

    def test_MakeArray(self):
        rng = np.random.default_rng(5)
        self.assertEqual(sorted(makeArray("shuffle", 20, rng)), list(range(20)))
        self.assertEqual(makeArray("count", 4), [0, 1, 2, 3])
        self.assertEqual(makeArray("reverse", 4), [3, 2, 1, 0])
        r = makeArray("random", 50, rng)
        self.assertEqual(len(r), 50)
        self.assertTrue(all(0 <= x < 50 for x in r))
        self.assertEqual(makeArray("random", 0), [])
        with self.assertRaises(ValueError):
            makeArray("sorted", 3)

    def test_Ops(self):
        for op in ("merge", "heap_left", "heap_right", "sort"):
            for kind in ARRAYS:
                status, out = self.run_main(["--op", op, "--array", kind, "--size", "50", "--seed", "1"])
                self.assertEqual(status, 0)
                self.assertEqual(out["op"], op)
                self.assertEqual(out["array"], kind)
                self.assertEqual(out["num_elems"], 50)
                self.assertTrue(out["is_sorted"])
                self.assertNotIn("compares", out)

    def test_Running(self):
        status, out = self.run_main(["-o", "run_left", "-r", "8", "-s", "30", "-c"])
        self.assertEqual(status, 0)
        self.assertNotIn("is_sorted", out)
        self.assertGreater(out["compares"], 0)
        self.assertGreater(out["swaps"], 0)

    def test_CountStats(self):
        status, out = self.run_main(["--count-stats", "--check", "--size", "40"])
        self.assertEqual(status, 0)
        self.assertTrue(out["is_sorted"])
        self.assertIn("elapsed", out)
        self.assertGreater(out["compares"], 0)

    def test_BadUsage(self):
        with contextlib.redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                main(["--op", "bogo"])
            self.assertEqual(main(["--size", "-1"]), 2)

    def test_Plot(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "counts.png")
            status, out = self.run_main(["--size", "64", "--plot", path, "--seed", "2"])
            self.assertEqual(status, 0)
            self.assertEqual(out["runs"], 15)
            self.assertTrue(os.path.getsize(path) > 0)

    def test_Sweep(self):
        rows = sweep(["merge", "sort"], "shuffle", 32)
        self.assertEqual([r["num_elems"] for r in rows], [16, 32])
        self.assertTrue(all(r["is_sorted"] for r in rows))


if __name__ == "__main__":
    unittest.main()
