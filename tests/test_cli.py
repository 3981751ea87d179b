import json
import tempfile
import unittest
from pathlib import Path

from typer.testing import CliRunner

from chembalance.cli import EXAMPLES, app


class TestCli(unittest.TestCase):
    def setUp(self):
        self.runner = CliRunner()

    def test_balance(self):
        result = self.runner.invoke(app, ["balance", "CH4 + O2 -> CO2 + H2O"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Coefficients: 1, 2, 1, 2", result.output)
        self.assertIn("CH₄ + 2O₂ → CO₂ + 2H₂O", result.output)

    def test_balance_json_with_steps(self):
        result = self.runner.invoke(app, ["balance", "H2 + O2 -> H2O", "--json", "--steps"])
        self.assertEqual(result.exit_code, 0, result.output)
        payload = json.loads(result.output)
        self.assertEqual(payload["status"], "success")
        self.assertEqual(payload["coefficients"], [2, 1, 2])
        self.assertEqual(payload["trace"]["steps"][0]["operation"], "initial")
        self.assertEqual(payload["trace"]["steps"][0]["matrix"], [[2.0, 0.0, -2.0], [0.0, 2.0, -1.0]])

    def test_balance_steps_text(self):
        result = self.runner.invoke(app, ["balance", "Fe + O2 -> Fe2O3", "--steps"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Step 1 [initial]: Initial matrix", result.output)
        self.assertIn("Atom conservation verified", result.output)

    def test_balance_failure_exit_code(self):
        result = self.runner.invoke(app, ["balance", "H2$O -> H2O"])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("parsing_error", result.output)

    def test_config_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            good = Path(tmp) / "good.json"
            good.write_text(json.dumps({"record_trace": False}))
            result = self.runner.invoke(
                app, ["balance", "H2 + O2 -> H2O", "--json", "--steps", "--config", str(good)]
            )
            self.assertEqual(result.exit_code, 0, result.output)
            payload = json.loads(result.output)
            self.assertIsNone(payload["trace"]["steps"][0]["matrix"])

            bad = Path(tmp) / "bad.json"
            bad.write_text(json.dumps({"tolerance": 1}))
            result = self.runner.invoke(
                app, ["balance", "H2 + O2 -> H2O", "--config", str(bad)]
            )
            self.assertEqual(result.exit_code, 2)

    def test_parse(self):
        result = self.runner.invoke(app, ["parse", "Ca(OH)2"])
        self.assertEqual(result.exit_code, 0, result.output)
        payload = json.loads(result.output)
        self.assertEqual(payload["elements"], {"Ca": 1, "H": 2, "O": 2})
        self.assertAlmostEqual(payload["molar_mass"], 74.092, places=3)
        self.assertTrue(payload["valid"])

    def test_parse_error(self):
        result = self.runner.invoke(app, ["parse", "H2$O"])
        self.assertEqual(result.exit_code, 1)

    def test_examples(self):
        result = self.runner.invoke(app, ["examples"])
        self.assertEqual(result.exit_code, 0)
        self.assertEqual(len(result.output.strip().splitlines()), len(EXAMPLES))


if __name__ == '__main__':
    unittest.main()
