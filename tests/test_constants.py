"""
Tests for the configuration registry and error types
"""

import unittest
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from fgprep.common.constants import (
    VALID_ATOMIC_NUMBERS,
    PlaceholderEntry,
    PlaceholderTable,
    get_pipeline_config,
    get_valid_atomic_numbers,
)
from fgprep.common.errors import (
    CodecConsistencyError,
    CodecError,
    ConfigurationError,
    ErrorSeverity,
    InputError,
)


class TestValidAtomicNumbers(unittest.TestCase):
    """Test the accepted element list"""

    def test_non_metals_accepted(self):
        for num in (1, 6, 7, 8, 9, 15, 16, 17, 34, 35, 53):
            self.assertIn(num, VALID_ATOMIC_NUMBERS)

    def test_metals_and_pseudo_atoms_excluded(self):
        for num in (0, 3, 5, 11, 14, 26, 33):
            self.assertNotIn(num, VALID_ATOMIC_NUMBERS)

    def test_getter_matches_table(self):
        self.assertEqual(get_valid_atomic_numbers(), VALID_ATOMIC_NUMBERS)


class TestPlaceholderTable(unittest.TestCase):
    """Test the placeholder bijection"""

    def setUp(self):
        self.table = PlaceholderTable()

    def test_default_mapping(self):
        self.assertEqual(self.table.for_source("C").placeholder, "Ce")
        self.assertEqual(self.table.for_source("Se").rendering, "Se*")
        self.assertEqual(self.table.for_placeholder("Nd").source, "N")
        self.assertEqual(self.table.generic.placeholder, "Es")
        self.assertEqual(self.table.generic.rendering, "R")

    def test_unknown_symbols(self):
        self.assertIsNone(self.table.for_source("Te"))
        self.assertIsNone(self.table.for_placeholder("C"))

    def test_sources_and_placeholders_disjoint(self):
        self.assertFalse(self.table.sources & self.table.placeholders)
        self.assertEqual(len(self.table.sources), len(self.table.entries))
        self.assertEqual(len(self.table.placeholders), len(self.table.entries))

    def test_duplicate_source_rejected(self):
        with self.assertRaises(ConfigurationError) as ctx:
            PlaceholderTable(entries=(
                PlaceholderEntry("C", "Ce", "C*"),
                PlaceholderEntry("C", "Nd", "C*"),
            ))
        self.assertEqual(ctx.exception.code, "DUPLICATE_SOURCE")

    def test_duplicate_placeholder_rejected(self):
        with self.assertRaises(ConfigurationError) as ctx:
            PlaceholderTable(entries=(
                PlaceholderEntry("C", "Ce", "C*"),
                PlaceholderEntry("N", "Ce", "N*"),
            ))
        self.assertEqual(ctx.exception.code, "DUPLICATE_PLACEHOLDER")

    def test_placeholder_colliding_with_source_rejected(self):
        with self.assertRaises(ConfigurationError) as ctx:
            PlaceholderTable(entries=(
                PlaceholderEntry("C", "N", "C*"),
                PlaceholderEntry("N", "Nd", "N*"),
            ))
        self.assertEqual(ctx.exception.code, "PLACEHOLDER_COLLISION")


class TestPlaceholderEntry(unittest.TestCase):
    """Test placeholder token matching"""

    def setUp(self):
        self.entry = PlaceholderTable().for_source("C")

    def test_bracket_forms(self):
        for token in ("[Ce]", "[CeH]", "[CeH2]", "[13CeH]", "[Ce+]"):
            self.assertTrue(self.entry.matches(token), token)

    def test_bare_form(self):
        self.assertTrue(self.entry.matches("Ce"))

    def test_other_atoms_do_not_match(self):
        for token in ("C", "[C]", "[CH]", "Cl", "[Cs]", "[Nd]"):
            self.assertFalse(self.entry.matches(token), token)


class TestPipelineConfig(unittest.TestCase):
    """Test the process-wide configuration"""

    def test_built_once(self):
        self.assertIs(get_pipeline_config(), get_pipeline_config())

    def test_defaults(self):
        config = get_pipeline_config()
        self.assertTrue(config.fail_closed)
        self.assertEqual(config.valid_atomic_numbers, frozenset(VALID_ATOMIC_NUMBERS))
        self.assertEqual(config.placeholders, PlaceholderTable())


class TestErrors(unittest.TestCase):
    """Test error serialization and hierarchy"""

    def test_to_dict(self):
        err = InputError("MISSING_MOLECULE", "Given molecule is None")
        self.assertEqual(err.to_dict(), {
            "code": "MISSING_MOLECULE",
            "message": "Given molecule is None",
            "severity": "medium",
        })
        self.assertEqual(str(err), "Given molecule is None")

    def test_consistency_error_is_codec_error(self):
        err = CodecConsistencyError("PLACEHOLDER_MISSING", "gone")
        self.assertIsInstance(err, CodecError)
        self.assertEqual(err.severity, ErrorSeverity.HIGH)


if __name__ == "__main__":
    unittest.main()
