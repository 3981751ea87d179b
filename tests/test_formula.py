import unittest

from chembalance.errors import ParseError
from chembalance.formula import clean_formula, format_subscripts, parse, parse_or_raise


class TestFormulaParser(unittest.TestCase):
    def test_simple_formulas(self):
        self.assertEqual(parse_or_raise("C6H12O6"), {"C": 6, "H": 12, "O": 6})
        self.assertEqual(parse_or_raise("H2O"), {"H": 2, "O": 1})
        self.assertEqual(parse_or_raise("Fe"), {"Fe": 1})

    def test_groups(self):
        self.assertEqual(parse_or_raise("Mg(OH)2"), {"Mg": 1, "O": 2, "H": 2})
        self.assertEqual(parse_or_raise("Ca(OH)2"), {"Ca": 1, "O": 2, "H": 2})
        self.assertEqual(parse_or_raise("Ca3(PO4)2"), {"Ca": 3, "P": 2, "O": 8})

    def test_repeated_elements_are_merged(self):
        # (NH4)2SO4 -> N:2, H:8, S:1, O:4
        self.assertEqual(parse_or_raise("(NH4)2SO4"), {"N": 2, "H": 8, "S": 1, "O": 4})
        self.assertEqual(parse_or_raise("CH3COOH"), {"C": 2, "H": 4, "O": 2})

    def test_nested_groups(self):
        self.assertEqual(
            parse_or_raise("K4(Fe(CN)6)"), {"K": 4, "Fe": 1, "C": 6, "N": 6}
        )
        self.assertEqual(parse_or_raise("((CH3)3C)2O"), {"C": 8, "H": 18, "O": 1})

    def test_multi_digit_counts(self):
        self.assertEqual(parse_or_raise("C12H22O11"), {"C": 12, "H": 22, "O": 11})
        self.assertEqual(parse_or_raise("(CH2)10"), {"C": 10, "H": 20})

    def test_state_tags_and_whitespace(self):
        self.assertEqual(clean_formula("NaCl(aq)"), "NaCl")
        self.assertEqual(clean_formula(" H2 O (l) "), "H2O")
        self.assertEqual(parse_or_raise("CO2(g)"), {"C": 1, "O": 2})
        self.assertEqual(parse_or_raise("Fe (s)"), {"Fe": 1})

    def test_result_keys_are_sorted(self):
        self.assertEqual(list(parse_or_raise("NaHCO3")), ["C", "H", "Na", "O"])

    def test_invalid_character(self):
        with self.assertRaises(ParseError) as ctx:
            parse_or_raise("H2$O")
        self.assertEqual(ctx.exception.position, 2)

    def test_square_brackets_are_out_of_grammar(self):
        with self.assertRaises(ParseError):
            parse_or_raise("K4[Fe(CN)6]")

    def test_unmatched_parentheses_terminate(self):
        with self.assertRaises(ParseError):
            parse_or_raise("Ca(OH2")
        with self.assertRaises(ParseError):
            parse_or_raise("CaOH)2")
        with self.assertRaises(ParseError):
            parse_or_raise("((((")

    def test_malformed_sequences(self):
        for formula in ["", "2H2O", "h2o", "H0", "()", "H2+O2", "Ca(OH)0"]:
            with self.subTest(formula=formula):
                with self.assertRaises(ParseError):
                    parse_or_raise(formula)

    def test_unknown_symbols_still_parse(self):
        # validity against the element table is a separate concern
        self.assertEqual(parse_or_raise("Xx2"), {"Xx": 2})

    def test_parse_returns_error_instead_of_raising(self):
        result = parse("H2$O")
        self.assertFalse(result.ok)
        self.assertIsInstance(result.error, ParseError)
        self.assertEqual(dict(result.counts), {})

        result = parse("Mg(OH)2")
        self.assertTrue(result.ok)
        self.assertEqual(dict(result.counts), {"H": 2, "Mg": 1, "O": 2})
        self.assertEqual(result.cleaned, "Mg(OH)2")

    def test_format_subscripts(self):
        self.assertEqual(format_subscripts("C6H12O6"), "C₆H₁₂O₆")
        self.assertEqual(format_subscripts("Ca(OH)2"), "Ca(OH)₂")
        self.assertEqual(format_subscripts("2H2O"), "2H₂O")


if __name__ == '__main__':
    unittest.main()
