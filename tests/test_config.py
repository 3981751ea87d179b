import json
import tempfile
import unittest
from pathlib import Path

from chembalance.config import BalancerConfig, config_from_mapping, load_config
from chembalance.errors import ConfigError


class TestBalancerConfig(unittest.TestCase):
    def test_defaults(self):
        config = BalancerConfig()
        self.assertEqual(config.epsilon, 1e-10)
        self.assertEqual(config.fraction_tolerance, 1e-6)
        self.assertEqual(config.max_denominator, 1000)
        self.assertEqual(config.fallback_denominator, 1000)
        self.assertTrue(config.record_trace)

    def test_invalid_values(self):
        for kwargs in [
            {"epsilon": 0.0},
            {"fraction_tolerance": -1e-6},
            {"max_denominator": 0},
            {"fallback_denominator": 2.5},
            {"record_trace": "yes"},
        ]:
            with self.subTest(**kwargs):
                with self.assertRaises(ConfigError):
                    BalancerConfig(**kwargs)

    def test_unknown_keys(self):
        with self.assertRaises(ConfigError):
            config_from_mapping({"epsilon": 1e-9, "pivoting": "full"})

    def test_load_config(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "balancer.json"
            path.write_text(json.dumps({"max_denominator": 500, "record_trace": False}))
            config = load_config(path)
        self.assertEqual(config.max_denominator, 500)
        self.assertFalse(config.record_trace)
        self.assertEqual(config.epsilon, 1e-10)

    def test_load_config_errors(self):
        with tempfile.TemporaryDirectory() as tmp:
            missing = Path(tmp) / "missing.json"
            with self.assertRaises(ConfigError):
                load_config(missing)

            broken = Path(tmp) / "broken.json"
            broken.write_text("{not json")
            with self.assertRaises(ConfigError):
                load_config(broken)

            listing = Path(tmp) / "list.json"
            listing.write_text("[1, 2]")
            with self.assertRaises(ConfigError):
                load_config(listing)


if __name__ == '__main__':
    unittest.main()
