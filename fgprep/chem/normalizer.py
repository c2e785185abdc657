"""
Structural Normalizer
=====================
Brings a molecule that *can* be analyzed into the form the functional-group
finder expects: one connected fragment, no formal charges, aromaticity
perceived with a caller-chosen model.

Charge neutralization is deliberately generic: the charge is zeroed and the
free valence is filled with implicit hydrogens according to the element's
default valences.  No per-group rules are applied, so some groups come out
with atypical valence states, e.g. a nitro group ``[N+](=O)[O-]`` keeps
its four-bonded nitrogen, now formally neutral, next to a new hydroxy
group.  Nitriles and sulfones behave similarly.  This is an accepted
approximation.

Public API:
    perceive_atom_types(mol)                  → Mol
    select_largest_fragment(mol)              → Mol   (new molecule)
    neutralize_atom(atom)                     → Atom  (same atom)
    neutralize_charges(mol)                   → Mol   (same molecule)
    apply_aromaticity(mol, model)             → Mol   (same molecule)
    normalize_for_analysis(mol, model)        → Mol | Rejected
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from rdkit import Chem

from fgprep.chem.eligibility import (
    has_invalid_atomic_number,
    has_zero_atoms_or_bonds,
    is_atom_charged,
    is_charged,
    is_disconnected,
)
from fgprep.chem.mol_parser import copy_molecule_properties
from fgprep.common.constants import PipelineConfig, get_pipeline_config
from fgprep.common.errors import ChemistryError, InputError, NormalizationError
from fgprep.models import Rejected

logger = logging.getLogger(__name__)

DEFAULT_AROMATICITY_MODEL = Chem.AromaticityModel.AROMATICITY_DEFAULT

AROMATICITY_MODELS = {
    "default": Chem.AromaticityModel.AROMATICITY_DEFAULT,
    "rdkit": Chem.AromaticityModel.AROMATICITY_RDKIT,
    "simple": Chem.AromaticityModel.AROMATICITY_SIMPLE,
    "mdl": Chem.AromaticityModel.AROMATICITY_MDL,
}

# No cleanup step (it would re-charge neutralized nitro groups) and no strict
# valence check.
_RING_OPS = Chem.SanitizeFlags.SANITIZE_SYMMRINGS
_BONDING_OPS = (
    Chem.SanitizeFlags.SANITIZE_SETCONJUGATION
    | Chem.SanitizeFlags.SANITIZE_SETHYBRIDIZATION
)


def _require_molecule(mol) -> None:
    if mol is None:
        raise InputError("MISSING_MOLECULE", "Given molecule is None")


def perceive_atom_types(mol: Chem.Mol) -> Chem.Mol:
    """Refresh valence and implicit-hydrogen information of every atom.

    Lenient: valences above the element defaults are kept, not rejected.
    """
    _require_molecule(mol)
    mol.UpdatePropertyCache(strict=False)
    return mol


def select_largest_fragment(mol: Chem.Mol) -> Chem.Mol:
    """Return the connected component of *mol* with the most atoms.

    Fragments are enumerated in order of their lowest atom index, and the
    first fragment of maximal size wins ties, so the choice is deterministic
    for a given atom order.  All molecule-level properties of *mol* are
    copied onto the returned fragment, which is a new molecule.

    Raises:
        InputError: If *mol* is None.
        NormalizationError: If *mol* has no fragments at all.
    """
    _require_molecule(mol)
    fragments = Chem.GetMolFrags(mol, asMols=True, sanitizeFrags=False)
    if not fragments:
        raise NormalizationError("NO_FRAGMENTS", "Molecule has no fragments to select from")
    largest = fragments[0]
    for fragment in fragments[1:]:
        if fragment.GetNumAtoms() > largest.GetNumAtoms():
            largest = fragment
    copy_molecule_properties(mol, largest)
    logger.debug("Selected fragment with %d of %d atoms from %d fragments",
                 largest.GetNumAtoms(), mol.GetNumAtoms(), len(fragments))
    return largest


def neutralize_atom(atom: Chem.Atom) -> Chem.Atom:
    """Zero the formal charge of *atom* and saturate it with implicit hydrogens.

    Uncharged atoms are returned untouched.  Hydrogens written on a charged
    bracket atom are discarded and recounted from the default valences.  The
    atom must belong to a molecule.

    Raises:
        InputError: If *atom* is None.
        NormalizationError: If no default valence is known for the element
            or the hydrogens cannot be recomputed.
    """
    if atom is None:
        raise InputError("MISSING_ATOM", "Given atom is None")
    if not is_atom_charged(atom):
        return atom
    valences = [v for v in Chem.GetPeriodicTable().GetValenceList(atom.GetAtomicNum()) if v >= 0]
    if not valences:
        raise NormalizationError(
            "ATOM_TYPE_NOT_FOUND",
            f"No atom type for neutral {atom.GetSymbol()} (atom {atom.GetIdx()})",
        )
    atom.SetFormalCharge(0)
    atom.SetNumRadicalElectrons(0)
    atom.SetNumExplicitHs(0)
    atom.SetNoImplicit(False)
    try:
        atom.UpdatePropertyCache(strict=False)
    except Exception as exc:
        raise NormalizationError(
            "HYDROGEN_SATURATION_FAILED",
            f"Cannot add hydrogens to {atom.GetSymbol()} (atom {atom.GetIdx()}): {exc}",
        ) from exc
    return atom


def _kekulize(mol: Chem.Mol) -> None:
    Chem.SanitizeMol(mol, sanitizeOps=_RING_OPS)
    Chem.Kekulize(mol, clearAromaticFlags=True)


def neutralize_charges(mol: Chem.Mol) -> Chem.Mol:
    """Neutralize every charged atom of *mol* in place and return *mol*.

    A charged molecule is kekulized first, so a charged ring atom such as
    the nitrogen of pyrrolide is saturated against integral bond orders
    (``c1cc[n-]c1`` becomes pyrrole).  A molecule without charged atoms is
    left exactly as it was.

    Raises:
        ChemistryError: If a charged molecule cannot be kekulized.
    """
    _require_molecule(mol)
    if not is_charged(mol):
        return mol
    mol.UpdatePropertyCache(strict=False)
    try:
        _kekulize(mol)
    except Exception as exc:
        raise ChemistryError(
            "KEKULIZATION_FAILED", f"Cannot kekulize charged molecule: {exc}"
        ) from exc
    for atom in mol.GetAtoms():
        neutralize_atom(atom)
    return mol


def apply_aromaticity(mol: Chem.Mol, model=DEFAULT_AROMATICITY_MODEL) -> Chem.Mol:
    """Kekulize *mol* and re-perceive aromaticity with *model*, in place.

    Raises:
        ChemistryError: If RDKit cannot kekulize the molecule.
    """
    _require_molecule(mol)
    if model is None:
        raise InputError("MISSING_AROMATICITY_MODEL", "Given aromaticity model is None")
    mol.UpdatePropertyCache(strict=False)
    try:
        _kekulize(mol)
        Chem.SanitizeMol(mol, sanitizeOps=_BONDING_OPS)
        Chem.SetAromaticity(mol, model)
    except Exception as exc:
        raise ChemistryError("AROMATICITY_FAILED", f"Cannot perceive aromaticity: {exc}") from exc
    return mol


def normalize_for_analysis(
    mol: Chem.Mol,
    aromaticity_model=DEFAULT_AROMATICITY_MODEL,
    config: Optional[PipelineConfig] = None,
) -> Union[Chem.Mol, Rejected]:
    """Run the full preprocessing pipeline on *mol*.

    Steps:
        1. Perceive atom types
        2. Reject if there are no atoms or no bonds
        3. Keep the largest fragment if the molecule is disconnected
        4. Reject if invalid atomic numbers remain
        5. Neutralize charges if any remain
        6. Apply the aromaticity model

    *mol* may be modified in place, and the returned molecule may be a new,
    smaller instance.  Every failure becomes a :class:`Rejected` outcome;
    a partially processed molecule is never returned.

    Raises:
        InputError: If *mol* or *aromaticity_model* is None.
    """
    _require_molecule(mol)
    if aromaticity_model is None:
        raise InputError("MISSING_AROMATICITY_MODEL", "Given aromaticity model is None")
    config = config or get_pipeline_config()
    try:
        perceive_atom_types(mol)
        if has_zero_atoms_or_bonds(mol):
            return Rejected(stage="zero_atoms_or_bonds",
                            reason="Molecule has no atoms or no bonds")
        if is_disconnected(mol):
            mol = select_largest_fragment(mol)
        if has_invalid_atomic_number(mol, config):
            return Rejected(stage="invalid_atomic_number",
                            reason="Molecule contains metal, metalloid or pseudo atoms")
        if is_charged(mol):
            mol = neutralize_charges(mol)
        apply_aromaticity(mol, aromaticity_model)
    except Exception as exc:
        logger.exception("Normalization failed, rejecting molecule")
        return Rejected(stage="error", reason=str(exc))
    return mol
