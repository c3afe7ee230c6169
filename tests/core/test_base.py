import tempfile
import unittest
from pathlib import Path

import numpy as np

from craterfit.core.base import (
    CommonArgs,
    CraterfitBase,
    DataError,
    DegenerateFitError,
    InsufficientDataError,
    _simdir_init,
    _to_config,
)


class TestBase(unittest.TestCase):
    def test_init_simdir(self):
        with tempfile.TemporaryDirectory(ignore_cleanup_errors=True) as simdir:
            # Test with a string path
            target_path = Path(simdir).resolve()
            newsimdir = _simdir_init(simdir=simdir)
            self.assertTrue(newsimdir.is_dir())
            self.assertEqual(newsimdir, target_path)

            # Test with a Path object
            simdir_path = _simdir_init(simdir=Path(simdir))
            self.assertTrue(simdir_path.is_dir())
            self.assertEqual(simdir_path, target_path)

            # A missing subdirectory is created
            newsimdir = _simdir_init(simdir=Path(simdir) / "nested")
            self.assertTrue(newsimdir.is_dir())

            # Test with an invalid path
            with self.assertRaises(TypeError):
                _simdir_init(123)

        # None is the current working directory
        self.assertEqual(_simdir_init(None), Path("."))

    def test_to_config(self):
        class Dummy:
            def __init__(self):
                self._user_defined = [
                    "int_attr",
                    "float_attr",
                    "str_attr",
                    "np_float_attr",
                    "np_array_attr",
                    "path_attr",
                    "tuple_attr",
                    "none_attr",
                ]
                self.int_attr = 1
                self.float_attr = 2.5
                self.str_attr = "hello"
                self.np_float_attr = np.float64(4.5)
                self.np_array_attr = np.array([1, 2, 3])
                self.path_attr = Path("/tmp/test")
                self.tuple_attr = (3, np.int64(4))
                self.none_attr = None

        config = _to_config(Dummy())

        self.assertNotIn("none_attr", config)
        self.assertEqual(config["int_attr"], 1)
        self.assertEqual(config["float_attr"], 2.5)
        self.assertEqual(config["str_attr"], "hello")
        self.assertEqual(config["np_float_attr"], 4.5)
        self.assertIsInstance(config["np_float_attr"], float)
        self.assertEqual(config["np_array_attr"], [1, 2, 3])
        self.assertEqual(config["path_attr"], str(Path("/tmp/test")))
        self.assertEqual(config["tuple_attr"], (3, 4))

    def test_craterfitbase_and_commonargs(self):
        with tempfile.TemporaryDirectory(ignore_cleanup_errors=True) as simdir:
            simdir = Path(simdir).resolve()
            args = CommonArgs(simdir=simdir)
            self.assertEqual(args.simdir, simdir)

            base = CraterfitBase(simdir=simdir)
            self.assertEqual(base.simdir, simdir)
            self.assertEqual(base.common_args, args)
            self.assertIn("simdir", base._user_defined)
            self.assertEqual(base.to_config(remove_common_args=True), {})

            with self.assertRaises(TypeError):
                CraterfitBase(simdir=3.5)

    def test_error_hierarchy(self):
        self.assertTrue(issubclass(DataError, ValueError))
        self.assertTrue(issubclass(InsufficientDataError, DataError))
        self.assertTrue(issubclass(DegenerateFitError, DataError))


if __name__ == "__main__":
    unittest.main()
