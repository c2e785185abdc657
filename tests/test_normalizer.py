"""
Tests for the structural normalizer
"""

import unittest
from unittest import mock
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from rdkit import Chem

from fgprep.chem.eligibility import is_charged, is_disconnected
from fgprep.chem.mol_parser import parse_smiles, to_canonical_smiles
from fgprep.chem.normalizer import (
    AROMATICITY_MODELS,
    apply_aromaticity,
    neutralize_atom,
    neutralize_charges,
    normalize_for_analysis,
    perceive_atom_types,
    select_largest_fragment,
)
from fgprep.common.errors import InputError, NormalizationError
from fgprep.models import Rejected


class TestSelectLargestFragment(unittest.TestCase):
    """Test fragment selection"""

    def test_largest_wins(self):
        largest = select_largest_fragment(parse_smiles("O.CCCC.CC"))
        self.assertEqual(to_canonical_smiles(largest), "CCCC")

    def test_tie_goes_to_first_fragment(self):
        self.assertEqual(to_canonical_smiles(select_largest_fragment(parse_smiles("CO.CN"))), "CO")
        self.assertEqual(to_canonical_smiles(select_largest_fragment(parse_smiles("CN.CO"))), "CN")

    def test_properties_copied(self):
        mol = parse_smiles("CCO.Cl")
        mol.SetProp("_Name", "ethanol hydrochloride")
        mol.SetIntProp("batch", 7)
        largest = select_largest_fragment(mol)
        self.assertIsNot(largest, mol)
        self.assertEqual(largest.GetProp("_Name"), "ethanol hydrochloride")
        self.assertEqual(largest.GetIntProp("batch"), 7)

    def test_empty_molecule(self):
        with self.assertRaises(NormalizationError):
            select_largest_fragment(Chem.Mol())


class TestNeutralization(unittest.TestCase):
    """Test charge neutralization"""

    def test_neutral_atom_untouched(self):
        mol = parse_smiles("CCO")
        atom = mol.GetAtomWithIdx(2)
        self.assertIs(neutralize_atom(atom), atom)
        self.assertEqual(atom.GetTotalNumHs(), 1)

    def test_anion_gets_hydrogen(self):
        mol = parse_smiles("CC[O-]")
        atom = neutralize_atom(mol.GetAtomWithIdx(2))
        self.assertEqual(atom.GetFormalCharge(), 0)
        self.assertEqual(atom.GetTotalNumHs(), 1)

    def test_cation_loses_hydrogen(self):
        mol = parse_smiles("C[NH3+]")
        neutralize_charges(mol)
        self.assertFalse(is_charged(mol))
        self.assertEqual(to_canonical_smiles(mol), "CN")

    def test_neutral_molecule_is_noop(self):
        mol = parse_smiles("CC(=O)O")
        before = to_canonical_smiles(mol)
        self.assertIs(neutralize_charges(mol), mol)
        self.assertEqual(to_canonical_smiles(mol), before)

    def test_aromatic_anion_kekulized_first(self):
        mol = neutralize_charges(parse_smiles("c1cc[n-]c1"))
        nitrogen = mol.GetAtomWithIdx(3)
        self.assertEqual(nitrogen.GetFormalCharge(), 0)
        self.assertEqual(nitrogen.GetTotalNumHs(), 1)
        self.assertFalse(nitrogen.GetIsAromatic())

    def test_element_without_default_valence(self):
        mol = parse_smiles("[Fe+2]")
        with self.assertRaises(NormalizationError) as ctx:
            neutralize_atom(mol.GetAtomWithIdx(0))
        self.assertEqual(ctx.exception.code, "ATOM_TYPE_NOT_FOUND")

    def test_missing_input(self):
        with self.assertRaises(InputError):
            neutralize_atom(None)
        with self.assertRaises(InputError):
            neutralize_charges(None)
        with self.assertRaises(InputError):
            perceive_atom_types(None)


class TestApplyAromaticity(unittest.TestCase):
    """Test aromaticity perception"""

    def test_models_available(self):
        self.assertEqual(set(AROMATICITY_MODELS), {"default", "rdkit", "simple", "mdl"})

    def test_pyridine_aromatic(self):
        mol = apply_aromaticity(parse_smiles("C1=CC=NC=C1"))
        self.assertTrue(all(atom.GetIsAromatic() for atom in mol.GetAtoms()))

    def test_missing_model(self):
        with self.assertRaises(InputError):
            apply_aromaticity(parse_smiles("c1ccccc1"), None)


class TestNormalizeForAnalysis(unittest.TestCase):
    """Test the full preprocessing pipeline"""

    def test_ethoxide(self):
        result = normalize_for_analysis(parse_smiles("CC[O-].C"))
        self.assertNotIsInstance(result, Rejected)
        self.assertEqual(to_canonical_smiles(result), "CCO")

    def test_sodium_acetate(self):
        result = normalize_for_analysis(parse_smiles("CC(=O)[O-].[Na+]"))
        self.assertEqual(to_canonical_smiles(result), "CC(=O)O")
        self.assertFalse(is_disconnected(result))
        self.assertFalse(is_charged(result))

    def test_nitro_neutralized_without_special_rules(self):
        result = normalize_for_analysis(parse_smiles("C[N+](=O)[O-]"))
        self.assertNotIsInstance(result, Rejected)
        self.assertFalse(is_charged(result))

    def test_pyrrolide_becomes_pyrrole(self):
        result = normalize_for_analysis(parse_smiles("c1cc[n-]c1"))
        self.assertNotIsInstance(result, Rejected)
        self.assertEqual(to_canonical_smiles(result), "c1cc[nH]c1")

    def test_fused_and_polyaza_aromatic_anions_accepted(self):
        for smiles in ("c1ccc2[n-]ccc2c1", "[n-]1nnnc1C", "[O-]c1ccccc1"):
            result = normalize_for_analysis(parse_smiles(smiles))
            self.assertNotIsInstance(result, Rejected, smiles)
            self.assertFalse(is_charged(result), smiles)

    def test_aromatic_ring_perceived(self):
        result = normalize_for_analysis(parse_smiles("Oc1ccccc1"),
                                        AROMATICITY_MODELS["mdl"])
        aromatic = [atom.GetIsAromatic() for atom in result.GetAtoms()]
        self.assertEqual(aromatic.count(True), 6)

    def test_model_replaces_earlier_perception(self):
        result = normalize_for_analysis(parse_smiles("c1ccoc1"), AROMATICITY_MODELS["mdl"])
        self.assertFalse(any(atom.GetIsAromatic() for atom in result.GetAtoms()))

    def test_rejects_without_bonds(self):
        result = normalize_for_analysis(parse_smiles("C"))
        self.assertIsInstance(result, Rejected)
        self.assertEqual(result.stage, "zero_atoms_or_bonds")

    def test_rejects_invalid_element(self):
        result = normalize_for_analysis(parse_smiles("C[Si](C)(C)C"))
        self.assertIsInstance(result, Rejected)
        self.assertEqual(result.stage, "invalid_atomic_number")

    def test_counter_ion_removed_before_element_check(self):
        result = normalize_for_analysis(parse_smiles("CCCC(=O)[O-].[K+]"))
        self.assertNotIsInstance(result, Rejected)

    def test_internal_failure_becomes_rejection(self):
        with mock.patch("fgprep.chem.normalizer.apply_aromaticity",
                        side_effect=RuntimeError("boom")):
            with self.assertLogs("fgprep.chem.normalizer", level="ERROR"):
                result = normalize_for_analysis(parse_smiles("CCO"))
        self.assertIsInstance(result, Rejected)
        self.assertEqual(result.stage, "error")
        self.assertEqual(result.reason, "boom")

    def test_missing_input(self):
        with self.assertRaises(InputError):
            normalize_for_analysis(None)
        with self.assertRaises(InputError):
            normalize_for_analysis(parse_smiles("CCO"), None)


if __name__ == "__main__":
    unittest.main()
