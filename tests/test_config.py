import unittest
import sys
import os
import tempfile

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from fakeforge.config import GenerationConfig, load_config
from fakeforge.errors import ConfigError


class TestGenerationConfig(unittest.TestCase):

    def test_defaults(self):
        config = GenerationConfig()
        self.assertEqual(config.num_rows, 100)
        self.assertIsNone(config.output_format)
        self.assertFalse(config.use_ai)
        self.assertEqual(config.ai_confidence_threshold, 0.7)
        self.assertGreaterEqual(config.worker_count, 1)

    def test_validate_normalizes_format(self):
        self.assertEqual(GenerationConfig(output_format="JSON").validate().output_format, "json")

    def test_validate_rejects_bad_values(self):
        for kwargs in ({"num_rows": -1}, {"batch_size": 0}, {"workers": -2}, {"output_format": "xml"}):
            with self.assertRaises(ConfigError, msg=str(kwargs)):
                GenerationConfig(**kwargs).validate()

    def test_merge_ignores_none(self):
        base = GenerationConfig(num_rows=5, seed=3)
        merged = base.merge(num_rows=None, seed=None, parallel=True)
        self.assertEqual((merged.num_rows, merged.seed, merged.parallel), (5, 3, True))
        self.assertFalse(base.parallel)

    def test_explicit_workers(self):
        self.assertEqual(GenerationConfig(workers=3).worker_count, 3)

    def test_from_env(self):
        environ = {
            "FAKEFORGE_NUM_ROWS": "25",
            "FAKEFORGE_PARALLEL": "true",
            "FAKEFORGE_SEED": "11",
            "FAKEFORGE_AI_CONFIDENCE_THRESHOLD": "0.9",
            "FAKEFORGE_OUTPUT_FORMAT": "json",
            "UNRELATED": "x",
        }
        config = GenerationConfig.from_env(environ=environ)
        self.assertEqual(config.num_rows, 25)
        self.assertTrue(config.parallel)
        self.assertEqual(config.seed, 11)
        self.assertEqual(config.ai_confidence_threshold, 0.9)
        self.assertEqual(config.output_format, "json")

    def test_from_env_rejects_garbage(self):
        with self.assertRaises(ConfigError):
            GenerationConfig.from_env(environ={"FAKEFORGE_NUM_ROWS": "lots"})


class TestLoadConfig(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmp.cleanup()

    def write(self, content):
        path = os.path.join(self.tmp.name, "fakeforge.yaml")
        with open(path, "w") as f:
            f.write(content)
        return path

    def test_yaml_values(self):
        config = load_config(self.write("num_rows: 42\nparallel: true\nbatch_size: 10\n"))
        self.assertEqual((config.num_rows, config.parallel, config.batch_size), (42, True, 10))

    def test_empty_file_keeps_defaults(self):
        self.assertEqual(load_config(self.write("")), GenerationConfig())

    def test_unknown_keys(self):
        with self.assertRaises(ConfigError):
            load_config(self.write("rows: 5\n"))

    def test_invalid_yaml(self):
        with self.assertRaises(ConfigError):
            load_config(self.write("num_rows: [1, 2\n"))

    def test_not_a_mapping(self):
        with self.assertRaises(ConfigError):
            load_config(self.write("- 1\n- 2\n"))

    def test_missing_file(self):
        with self.assertRaises(ConfigError):
            load_config(os.path.join(self.tmp.name, "missing.yaml"))


if __name__ == '__main__':
    unittest.main()
