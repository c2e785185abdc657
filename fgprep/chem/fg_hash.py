"""
Functional-Group Hashing
========================
Declares which features make two extracted functional groups "the same"
and turns a group into an integer key under that declaration.

The features are element identity, the sum of bond orders at each atom
(instead of hybridization, which is meaningless for groups whose valences
were cut open on extraction) and an aromaticity seed.  They become RDKit
custom atom invariants for a Morgan environment hash of radius ``depth``;
bond types are not used, so resonance forms whose atoms carry the same
bond-order sums hash alike.

Public API:
    HashScheme                                  (frozen dataclass)
    get_functional_group_hash_scheme()          → HashScheme  (cached)
    generate_hash(mol, scheme)                  → int         (64-bit)
    count_functional_groups(groups, scheme)     → List[FunctionalGroupCount]
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Iterable, List, Optional

from rdkit import Chem
from rdkit.Chem import rdFingerprintGenerator

from fgprep.chem.mol_parser import to_canonical_smiles
from fgprep.chem.pseudo_smiles import create_pseudo_smiles
from fgprep.common.constants import HashDefaults, PipelineConfig
from fgprep.common.errors import InputError
from fgprep.models import FunctionalGroupCount

logger = logging.getLogger(__name__)


def _stable_int(text: str, size: int) -> int:
    # builtin hash() is salted per process
    return int.from_bytes(hashlib.blake2b(text.encode(), digest_size=size).digest(), "big")


@dataclass(frozen=True)
class HashScheme:
    """Discriminating features for functional-group deduplication."""

    depth: int = HashDefaults.DEPTH
    elemental: bool = True
    bond_order_sum: bool = True
    aromaticity: bool = True
    aromatic_seed: int = HashDefaults.AROMATIC_SEED
    non_aromatic_seed: int = HashDefaults.NON_AROMATIC_SEED

    def atom_features(self, atom: Chem.Atom) -> tuple:
        features = []
        if self.elemental:
            features.append(atom.GetAtomicNum())
        if self.bond_order_sum:
            # doubled so aromatic 1.5 orders stay integral
            total = sum(bond.GetBondTypeAsDouble() for bond in atom.GetBonds())
            features.append(int(round(2 * total)))
        if self.aromaticity:
            features.append(self.aromatic_seed if atom.GetIsAromatic()
                            else self.non_aromatic_seed)
        return tuple(features)

    def atom_invariants(self, mol: Chem.Mol) -> List[int]:
        """One unsigned 32-bit invariant per atom, in atom-index order."""
        return [_stable_int(repr(self.atom_features(atom)), 4) for atom in mol.GetAtoms()]


@lru_cache(maxsize=1)
def get_functional_group_hash_scheme() -> HashScheme:
    """The scheme used to deduplicate functional groups, built once."""
    return HashScheme()


def generate_hash(mol: Chem.Mol, scheme: Optional[HashScheme] = None) -> int:
    """Equivalence key of *mol* under *scheme*.

    Equal for groups that are equivalent under the scheme's features and
    stable across processes.  *mol* is not modified.
    """
    if mol is None:
        raise InputError("MISSING_MOLECULE", "Given molecule is None")
    scheme = scheme or get_functional_group_hash_scheme()
    work = Chem.Mol(mol)
    work.UpdatePropertyCache(strict=False)
    Chem.FastFindRings(work)
    generator = rdFingerprintGenerator.GetMorganGenerator(
        radius=scheme.depth, useBondTypes=False)
    fingerprint = generator.GetSparseCountFingerprint(
        work, customAtomInvariants=scheme.atom_invariants(work))
    environments = sorted(fingerprint.GetNonzeroElements().items())
    return _stable_int(repr((work.GetNumAtoms(), environments)), 8)


def count_functional_groups(
    groups: Iterable[Chem.Mol],
    scheme: Optional[HashScheme] = None,
    config: Optional[PipelineConfig] = None,
) -> List[FunctionalGroupCount]:
    """Deduplicate *groups* by hash key and count each distinct group.

    Results are in order of first occurrence; SMILES and pseudo-SMILES are
    those of the first occurrence.
    """
    scheme = scheme or get_functional_group_hash_scheme()
    counts: Dict[int, FunctionalGroupCount] = {}
    for group in groups:
        key = generate_hash(group, scheme)
        entry = counts.get(key)
        if entry is None:
            entry = FunctionalGroupCount(
                hash_key=key,
                smiles=to_canonical_smiles(group),
                pseudo_smiles=create_pseudo_smiles(group, config),
            )
            counts[key] = entry
        entry.frequency += 1
    logger.debug("Counted %d distinct functional groups", len(counts))
    return list(counts.values())
