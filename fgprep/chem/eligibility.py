"""
Eligibility Filter
==================
Side-effect-free predicates that decide whether a molecule can go to the
functional-group finder as-is, has to be normalized first, or must be
rejected.

Rejection (invalid atomic numbers, no atoms or no bonds) and normalization
(charges, several fragments) are independent axes, so a caller can either
reject fast or always attempt normalization before rejecting.

Public API:
    is_disconnected(mol)            → bool
    has_zero_atoms_or_bonds(mol)    → bool
    is_atom_charged(atom)           → bool
    is_charged(mol)                 → bool
    is_atomic_number_invalid(atom)  → bool
    has_invalid_atomic_number(mol)  → bool
    should_reject(mol)              → bool   (fail-closed by default)
    needs_normalization(mol)        → bool
    is_ready_for_analysis(mol)      → bool   (fail-closed by default)
    assess_eligibility(mol)         → EligibilityReport
"""

from __future__ import annotations

import logging
from typing import Optional

from rdkit import Chem

from fgprep.common.constants import PipelineConfig, get_pipeline_config
from fgprep.common.errors import EligibilityError, InputError
from fgprep.models import EligibilityReport

logger = logging.getLogger(__name__)


def _require_molecule(mol) -> None:
    if mol is None:
        raise InputError("MISSING_MOLECULE", "Given molecule is None")
    if not isinstance(mol, Chem.Mol):
        raise InputError(
            "INVALID_MOLECULE_TYPE",
            f"Expected an RDKit Mol, got {type(mol).__name__}",
        )


def _require_atom(atom) -> None:
    if atom is None:
        raise InputError("MISSING_ATOM", "Given atom is None")


def _resolve_fail_closed(fail_closed: Optional[bool], config: PipelineConfig) -> bool:
    return config.fail_closed if fail_closed is None else fail_closed


# ---------------------------------------------------------------------------
# Elementary predicates
# ---------------------------------------------------------------------------

def is_disconnected(mol: Chem.Mol) -> bool:
    """True if the bond graph of *mol* has more than one connected component."""
    _require_molecule(mol)
    return len(Chem.GetMolFrags(mol)) > 1


def has_zero_atoms_or_bonds(mol: Chem.Mol) -> bool:
    """True if *mol* has no atoms or no bonds.

    The finder would accept such molecules, but there is nothing to extract
    from them.
    """
    _require_molecule(mol)
    return mol.GetNumAtoms() == 0 or mol.GetNumBonds() == 0


def is_atom_charged(atom: Chem.Atom) -> bool:
    """True if *atom* carries a non-zero formal charge."""
    _require_atom(atom)
    return atom.GetFormalCharge() != 0


def is_charged(mol: Chem.Mol) -> bool:
    """True if any atom of *mol* is charged; stops at the first one found."""
    _require_molecule(mol)
    return any(is_atom_charged(atom) for atom in mol.GetAtoms())


def is_atomic_number_invalid(
    atom: Chem.Atom,
    config: Optional[PipelineConfig] = None,
) -> bool:
    """True if *atom* is a metal, a metalloid or a pseudo atom.

    Judged by membership of its atomic number in
    :data:`~fgprep.common.constants.VALID_ATOMIC_NUMBERS`.
    """
    _require_atom(atom)
    config = config or get_pipeline_config()
    return atom.GetAtomicNum() not in config.valid_atomic_numbers


def has_invalid_atomic_number(
    mol: Chem.Mol,
    config: Optional[PipelineConfig] = None,
) -> bool:
    """True if any atom of *mol* has an invalid atomic number; short-circuits."""
    _require_molecule(mol)
    config = config or get_pipeline_config()
    return any(is_atomic_number_invalid(atom, config) for atom in mol.GetAtoms())


# ---------------------------------------------------------------------------
# Composite predicates
# ---------------------------------------------------------------------------

def should_reject(
    mol: Chem.Mol,
    config: Optional[PipelineConfig] = None,
    fail_closed: Optional[bool] = None,
) -> bool:
    """True if *mol* must be discarded instead of analyzed.

    Args:
        mol: Molecule to check.
        config: Pipeline configuration (process-wide default if omitted).
        fail_closed: If true, any internal failure counts as "reject" and is
            only logged; if false it is raised as :class:`EligibilityError`.
            ``None`` uses ``config.fail_closed``.

    Raises:
        InputError: If *mol* is None.
    """
    _require_molecule(mol)
    config = config or get_pipeline_config()
    try:
        return has_invalid_atomic_number(mol, config) or has_zero_atoms_or_bonds(mol)
    except Exception as exc:
        if not _resolve_fail_closed(fail_closed, config):
            raise EligibilityError(
                "ELIGIBILITY_CHECK_FAILED", f"Rejection check failed: {exc}"
            ) from exc
        logger.warning("Rejection check failed, rejecting molecule: %s", exc, exc_info=True)
        return True


def needs_normalization(mol: Chem.Mol) -> bool:
    """True if *mol* is charged or consists of several fragments.

    Unlike the other composite checks this one never swallows failures.
    """
    _require_molecule(mol)
    try:
        return is_charged(mol) or is_disconnected(mol)
    except InputError:
        raise
    except Exception as exc:
        logger.warning("Normalization check failed: %s", exc, exc_info=True)
        raise EligibilityError(
            "ELIGIBILITY_CHECK_FAILED", f"Normalization check failed: {exc}"
        ) from exc


def is_ready_for_analysis(
    mol: Chem.Mol,
    config: Optional[PipelineConfig] = None,
    fail_closed: Optional[bool] = None,
) -> bool:
    """True if *mol* can be passed to the finder without any preprocessing.

    Failure handling follows *fail_closed* exactly like :func:`should_reject`,
    with "not ready" as the closed answer.
    """
    _require_molecule(mol)
    config = config or get_pipeline_config()
    try:
        return not (
            has_invalid_atomic_number(mol, config)
            or has_zero_atoms_or_bonds(mol)
            or is_charged(mol)
            or is_disconnected(mol)
        )
    except Exception as exc:
        if not _resolve_fail_closed(fail_closed, config):
            raise EligibilityError(
                "ELIGIBILITY_CHECK_FAILED", f"Readiness check failed: {exc}"
            ) from exc
        logger.error("Readiness check failed, treating molecule as not ready: %s",
                     exc, exc_info=True)
        return False


def assess_eligibility(
    mol: Chem.Mol,
    config: Optional[PipelineConfig] = None,
) -> EligibilityReport:
    """Evaluate every predicate of this module for *mol* in one report."""
    _require_molecule(mol)
    config = config or get_pipeline_config()
    return EligibilityReport(
        atom_count=mol.GetNumAtoms(),
        bond_count=mol.GetNumBonds(),
        disconnected=is_disconnected(mol),
        charged=is_charged(mol),
        invalid_atomic_number=has_invalid_atomic_number(mol, config),
        zero_atoms_or_bonds=has_zero_atoms_or_bonds(mol),
        should_reject=should_reject(mol, config),
        needs_normalization=needs_normalization(mol),
        ready=is_ready_for_analysis(mol, config),
    )
