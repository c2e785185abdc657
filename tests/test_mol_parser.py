"""
Tests for SMILES parsing and molecule copies
"""

import unittest
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from rdkit import Chem

from fgprep.chem.mol_parser import (
    clear_cache,
    copy_molecule,
    copy_molecule_properties,
    parse_fragment_smiles,
    parse_smiles,
    to_canonical_smiles,
    validate_smiles,
)
from fgprep.common.errors import InputError


class TestParseSmiles(unittest.TestCase):
    """Test sanitized parsing"""

    def tearDown(self):
        clear_cache()

    def test_valid(self):
        mol = parse_smiles("CCO")
        self.assertIsNotNone(mol)
        self.assertEqual(mol.GetNumAtoms(), 3)

    def test_invalid_and_empty(self):
        self.assertIsNone(parse_smiles("C1CC"))
        self.assertIsNone(parse_smiles(""))
        self.assertIsNone(parse_smiles(None))

    def test_each_call_gets_own_copy(self):
        first = parse_smiles("CCO")
        second = parse_smiles("CCO")
        self.assertIsNot(first, second)
        first.GetAtomWithIdx(2).SetFormalCharge(-1)
        self.assertEqual(second.GetAtomWithIdx(2).GetFormalCharge(), 0)
        self.assertEqual(parse_smiles("CCO").GetAtomWithIdx(2).GetFormalCharge(), 0)


class TestParseFragmentSmiles(unittest.TestCase):
    """Test lenient parsing of extracted groups"""

    def test_explicit_hydrogen_kept(self):
        group = parse_fragment_smiles("[H]O[c]")
        self.assertIsInstance(group, Chem.RWMol)
        self.assertEqual(group.GetNumAtoms(), 3)
        self.assertEqual(group.GetAtomWithIdx(0).GetAtomicNum(), 1)

    def test_aromatic_atom_outside_ring(self):
        group = parse_fragment_smiles("*n(*)*")
        nitrogen = group.GetAtomWithIdx(1)
        self.assertTrue(nitrogen.GetIsAromatic())
        self.assertEqual(group.GetAtomWithIdx(0).GetAtomicNum(), 0)

    def test_unparsable(self):
        self.assertIsNone(parse_fragment_smiles("C(("))
        self.assertIsNone(parse_fragment_smiles(""))


class TestValidateSmiles(unittest.TestCase):
    """Test SMILES safety checks"""

    def test_valid(self):
        self.assertEqual(validate_smiles("CCO"), (True, ""))

    def test_empty(self):
        ok, reason = validate_smiles("   ")
        self.assertFalse(ok)
        self.assertIn("empty", reason)

    def test_invalid_characters(self):
        ok, reason = validate_smiles("C C")
        self.assertFalse(ok)
        self.assertIn("invalid characters", reason)

    def test_too_long(self):
        ok, reason = validate_smiles("C" * 5001)
        self.assertFalse(ok)
        self.assertIn("maximum length", reason)

    def test_unparsable(self):
        ok, reason = validate_smiles("C1CC")
        self.assertFalse(ok)
        self.assertIn("cannot parse", reason)

    def test_unbalanced(self):
        for smiles in ("CC(O", "CC)O(", "C[NH4+"):
            ok, reason = validate_smiles(smiles)
            self.assertFalse(ok, smiles)
            self.assertIn("unbalanced", reason)

    def test_nesting_too_deep(self):
        ok, reason = validate_smiles("C" + "(C" * 41 + ")" * 41)
        self.assertFalse(ok)
        self.assertIn("nesting depth", reason)

    def test_fragment_uses_lenient_parse(self):
        for smiles in ("[H]O[c]", "*n(*)*"):
            self.assertFalse(validate_smiles(smiles)[0], smiles)
            self.assertEqual(validate_smiles(smiles, fragment=True), (True, ""))
        ok, reason = validate_smiles("C1CC", fragment=True)
        self.assertFalse(ok)
        self.assertIn("cannot parse", reason)


class TestCanonicalAndCopies(unittest.TestCase):
    """Test canonical output and deep copies"""

    def test_canonical(self):
        self.assertEqual(to_canonical_smiles(parse_smiles("OCC")), "CCO")

    def test_canonical_none(self):
        with self.assertRaises(InputError):
            to_canonical_smiles(None)

    def test_copy_keeps_properties(self):
        mol = parse_smiles("CCO")
        mol.SetProp("_Name", "ethanol")
        mol.SetDoubleProp("score", 1.5)
        mol.SetIntProp("count", 3)
        mol.SetBoolProp("flag", True)
        clone = copy_molecule(mol)
        self.assertIsNot(clone, mol)
        self.assertEqual(clone.GetProp("_Name"), "ethanol")
        self.assertAlmostEqual(clone.GetDoubleProp("score"), 1.5)
        self.assertEqual(clone.GetIntProp("count"), 3)
        self.assertTrue(clone.GetBoolProp("flag"))

    def test_copy_is_independent(self):
        mol = parse_smiles("CCO")
        clone = copy_molecule(mol)
        clone.GetAtomWithIdx(0).SetFormalCharge(1)
        self.assertEqual(mol.GetAtomWithIdx(0).GetFormalCharge(), 0)

    def test_copy_properties_between_molecules(self):
        source = parse_smiles("CCO")
        source.SetProp("origin", "batch-7")
        target = parse_smiles("CC")
        copy_molecule_properties(source, target)
        self.assertEqual(target.GetProp("origin"), "batch-7")

    def test_copy_none(self):
        with self.assertRaises(InputError):
            copy_molecule(None)


if __name__ == "__main__":
    unittest.main()
