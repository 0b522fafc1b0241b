import io
import os
import shutil
import tempfile
import unittest
from unittest.mock import patch

import liftchain
from liftchain.lc import main

data_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data")
small_chain_path = os.path.join(data_dir, "small.chain")


class TestLiftChainCommand(unittest.TestCase):
    def setUp(self):
        self.tmp_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmp_dir)

    def write_loci(self, text):
        path = os.path.join(self.tmp_dir, "loci.txt")
        with open(path, "w") as wf:
            wf.write(text)
        return path

    def test_lift_to_file(self):
        loci_path = self.write_loci("# loci\nchr1(+):15\nchr1(+):20\n\nchr1(-):100\nnot a locus\n")
        out_path = os.path.join(self.tmp_dir, "out.txt")
        ret = main(["lift", small_chain_path, loci_path, "-o", out_path])
        self.assertEqual(0, ret)
        with open(out_path) as f:
            rows = [line.rstrip("\n").split("\t") for line in f]
        self.assertEqual(
            [
                ["chr1(+):15", "chr2(+):105"],
                ["chr1(+):20", "."],
                ["chr1(-):100", "chr5(+):500"],
            ],
            rows,
        )

    def test_lift_counts(self):
        from liftchain.lc import lift, root_p
        from liftchain.config_loader import ConfigLoader

        loci_path = self.write_loci("chr1(+):15\nchr1(+):20\nbad\n")
        args = root_p.parse_args(
            ["lift", small_chain_path, loci_path, "-o", os.path.join(self.tmp_dir, "o.txt")]
        )
        with self.assertLogs("error.liftchain", level="ERROR") as cm:
            counts = lift(args, ConfigLoader())
        self.assertEqual((1, 1, 1), counts)
        self.assertIn("INPUT:bad", cm.output[0])

    @patch("sys.stdout", new_callable=io.StringIO)
    @patch("sys.stdin", new_callable=lambda: io.StringIO("chr3(+):1\n"))
    def test_lift_stdin_to_stdout(self, mock_stdin, mock_stdout):
        ret = main(["lift", small_chain_path])
        self.assertEqual(0, ret)
        self.assertEqual("chr3(+):1\tchr3(-):401\n", mock_stdout.getvalue())

    @patch("sys.stdout", new_callable=io.StringIO)
    def test_info(self, mock_stdout):
        ret = main(["info", small_chain_path])
        self.assertEqual(0, ret)
        self.assertEqual(
            "lines: 10\nblocks: 4\nchr1(+)\t2\nchr1(-)\t1\nchr3(+)\t1\n",
            mock_stdout.getvalue(),
        )

    @patch("sys.stdout", new_callable=io.StringIO)
    def test_version(self, mock_stdout):
        self.assertEqual(0, main(["version"]))
        self.assertEqual(liftchain.__version__ + "\n", mock_stdout.getvalue())

    @patch("sys.stderr", new_callable=io.StringIO)
    def test_bad_chain_file_fails(self, mock_stderr):
        bad_path = os.path.join(self.tmp_dir, "bad.chain")
        with open(bad_path, "w") as wf:
            wf.write("chain 0 chr1 1000 + 10 20 chr2 1000 + 100 110\n11\n")
        self.assertEqual(1, main(["lift", bad_path, self.write_loci("chr1(+):10\n")]))
        self.assertIn("--debug", mock_stderr.getvalue())

    @patch("sys.stderr", new_callable=io.StringIO)
    def test_no_command(self, mock_stderr):
        self.assertEqual(1, main([]))


if __name__ == '__main__':
    unittest.main()
