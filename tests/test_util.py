import gzip
import logging
import os
import pathlib
import shutil
import tempfile
import unittest
from unittest.mock import MagicMock

from liftchain import util
from liftchain.exceptions import LiftoverFailure

data_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data")
small_chain_path = os.path.join(data_dir, "small.chain")


class TestInputFiles(unittest.TestCase):
    def setUp(self):
        self.tmp_dir = tempfile.mkdtemp()
        self.gz_path = os.path.join(self.tmp_dir, "small.chain.gz")
        with open(small_chain_path, "rb") as f, gzip.open(self.gz_path, "wb") as wf:
            wf.write(f.read())

    def tearDown(self):
        shutil.rmtree(self.tmp_dir)

    def test_ascii_is_reported_as_utf8(self):
        self.assertEqual("utf-8", util.detect_encoding(small_chain_path))
        self.assertEqual("utf-8", util.detect_encoding(self.gz_path))

    def test_empty_file(self):
        path = os.path.join(self.tmp_dir, "empty.chain")
        open(path, "w").close()
        self.assertEqual("utf-8", util.detect_encoding(path))

    def test_open_plain_file(self):
        with open(small_chain_path) as f:
            expected = f.read()
        with util.open_input_file(small_chain_path) as f:
            self.assertEqual(expected, f.read())

    def test_open_gzip_file(self):
        with open(small_chain_path) as f:
            expected = f.read()
        with util.open_input_file(self.gz_path) as f:
            self.assertEqual(expected, f.read())

    def test_open_path_like(self):
        with util.open_input_file(pathlib.Path(small_chain_path)) as f:
            self.assertTrue(f.readline().startswith("#"))


class TestConf(unittest.TestCase):
    def setUp(self):
        self.tmp_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmp_dir)

    def test_empty_yml(self):
        path = os.path.join(self.tmp_dir, "empty.yml")
        open(path, "w").close()
        self.assertEqual({}, util.load_yml_conf(path))

    def test_yml(self):
        path = os.path.join(self.tmp_dir, "conf.yml")
        with open(path, "w") as wf:
            wf.write("log_every: 5\nchains:\n  hg19ToHg38: /data/a.chain\n")
        conf = util.load_yml_conf(path)
        self.assertEqual(5, conf["log_every"])
        self.assertEqual({"hg19ToHg38": "/data/a.chain"}, conf["chains"])

    def test_recursive_update(self):
        base = {"log_level": "INFO", "chains": {"a": "1", "b": "2"}}
        override = {"log_level": "DEBUG", "chains": {"b": "3"}, "chains_dir": "/x"}
        merged = util.recursive_update(base, override)
        self.assertEqual(
            {"log_level": "DEBUG", "chains": {"a": "1", "b": "3"}, "chains_dir": "/x"},
            merged,
        )
        self.assertEqual({"log_level": "INFO", "chains": {"a": "1", "b": "2"}}, base)
        self.assertEqual({"log_level": "DEBUG", "chains": {"b": "3"}, "chains_dir": "/x"}, override)

    def test_recursive_update_replaces_non_dict(self):
        merged = util.recursive_update({"chains": {"a": "1"}}, {"chains": None})
        self.assertIsNone(merged["chains"])


class TestLogging(unittest.TestCase):
    def test_write_log_msg(self):
        logger = MagicMock()
        util.write_log_msg(logger, LiftoverFailure("chr1(+):5 has no mapping"))
        logger.error.assert_called_once()
        logger.reset_mock()
        e = KeyError("x")
        util.write_log_msg(logger, e)
        logger.error.assert_called_once_with("%s: %s", "KeyError", e)

    def test_get_level(self):
        self.assertEqual(logging.DEBUG, util.get_level("debug"))
        with self.assertRaises(ValueError):
            util.get_level("loud")


if __name__ == '__main__':
    unittest.main()
