"""
Chemistry data models — atom snapshots, eligibility and normalization outcomes.

Provides typed dataclasses for the per-atom state the pseudo-SMILES codec
must restore, the eligibility report, the rejection outcome of the
normalizer and deduplicated functional-group counts.  Every class
implements ``to_dict()`` / ``from_dict()`` with round-trip consistency and
missing-field tolerance.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


# ---------------------------------------------------------------------------
# AtomSnapshot
# ---------------------------------------------------------------------------

@dataclass
class AtomSnapshot:
    """Value copy of the atom fields the pipeline reads or rewrites."""

    idx: int = 0
    symbol: str = ""
    atomic_num: int = 0
    formal_charge: int = 0
    aromatic: bool = False
    num_hs: int = 0
    no_implicit: bool = False
    generic: bool = False

    @classmethod
    def from_atom(cls, atom) -> "AtomSnapshot":
        """Capture an RDKit atom (property cache must be up to date)."""
        return cls(
            idx=atom.GetIdx(),
            symbol=atom.GetSymbol(),
            atomic_num=atom.GetAtomicNum(),
            formal_charge=atom.GetFormalCharge(),
            aromatic=atom.GetIsAromatic(),
            num_hs=atom.GetTotalNumHs(),
            no_implicit=atom.GetNoImplicit(),
            generic=atom.GetAtomicNum() == 0,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "idx": self.idx,
            "symbol": self.symbol,
            "atomic_num": self.atomic_num,
            "formal_charge": self.formal_charge,
            "aromatic": self.aromatic,
            "num_hs": self.num_hs,
            "no_implicit": self.no_implicit,
            "generic": self.generic,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "AtomSnapshot":
        return cls(
            idx=d.get("idx", 0),
            symbol=d.get("symbol", ""),
            atomic_num=d.get("atomic_num", 0),
            formal_charge=d.get("formal_charge", 0),
            aromatic=d.get("aromatic", False),
            num_hs=d.get("num_hs", 0),
            no_implicit=d.get("no_implicit", False),
            generic=d.get("generic", False),
        )


# ---------------------------------------------------------------------------
# EligibilityReport
# ---------------------------------------------------------------------------

@dataclass
class EligibilityReport:
    """All eligibility predicates evaluated for one molecule."""

    atom_count: int = 0
    bond_count: int = 0
    disconnected: bool = False
    charged: bool = False
    invalid_atomic_number: bool = False
    zero_atoms_or_bonds: bool = False
    should_reject: bool = False
    needs_normalization: bool = False
    ready: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "atom_count": self.atom_count,
            "bond_count": self.bond_count,
            "disconnected": self.disconnected,
            "charged": self.charged,
            "invalid_atomic_number": self.invalid_atomic_number,
            "zero_atoms_or_bonds": self.zero_atoms_or_bonds,
            "should_reject": self.should_reject,
            "needs_normalization": self.needs_normalization,
            "ready": self.ready,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "EligibilityReport":
        return cls(
            atom_count=d.get("atom_count", 0),
            bond_count=d.get("bond_count", 0),
            disconnected=d.get("disconnected", False),
            charged=d.get("charged", False),
            invalid_atomic_number=d.get("invalid_atomic_number", False),
            zero_atoms_or_bonds=d.get("zero_atoms_or_bonds", False),
            should_reject=d.get("should_reject", False),
            needs_normalization=d.get("needs_normalization", False),
            ready=d.get("ready", False),
        )


# ---------------------------------------------------------------------------
# Rejected
# ---------------------------------------------------------------------------

@dataclass
class Rejected:
    """Outcome of a normalization run that did not produce a molecule.

    ``stage`` names the pipeline step that rejected the molecule
    (``"zero_atoms_or_bonds"``, ``"invalid_atomic_number"`` or ``"error"``).
    """

    stage: str = ""
    reason: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"stage": self.stage, "reason": self.reason}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Rejected":
        return cls(stage=d.get("stage", ""), reason=d.get("reason", ""))


# ---------------------------------------------------------------------------
# FunctionalGroupCount
# ---------------------------------------------------------------------------

@dataclass
class FunctionalGroupCount:
    """One deduplicated functional group and how often it occurred."""

    hash_key: int = 0
    smiles: str = ""
    pseudo_smiles: str = ""
    frequency: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hash_key": self.hash_key,
            "smiles": self.smiles,
            "pseudo_smiles": self.pseudo_smiles,
            "frequency": self.frequency,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "FunctionalGroupCount":
        return cls(
            hash_key=d.get("hash_key", 0),
            smiles=d.get("smiles", ""),
            pseudo_smiles=d.get("pseudo_smiles", ""),
            frequency=d.get("frequency", 0),
        )
