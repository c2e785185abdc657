"""
Skill input/output data models.

Typed dataclasses for the prepare-molecule skill.  Every class implements
``to_dict()`` / ``from_dict()`` with round-trip consistency and
missing-field tolerance.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .chem_models import EligibilityReport, Rejected


@dataclass
class PrepareArgs:
    """Input for PrepareMoleculeSkill.

    ``fragment`` marks the SMILES as an extracted functional group: it is
    parsed without sanitization and only encoded, never normalized.
    """

    smiles: str = ""
    aromaticity_model: str = "default"
    fragment: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "smiles": self.smiles,
            "aromaticity_model": self.aromaticity_model,
            "fragment": self.fragment,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "PrepareArgs":
        return cls(
            smiles=d.get("smiles", ""),
            aromaticity_model=d.get("aromaticity_model", "default"),
            fragment=d.get("fragment", False),
        )


@dataclass
class PreparationResult:
    """Output of PrepareMoleculeSkill."""

    success: bool = False
    input_smiles: str = ""
    eligibility: Optional[EligibilityReport] = None
    canonical_smiles: str = ""
    pseudo_smiles: str = ""
    hash_key: Optional[int] = None
    rejected: Optional[Rejected] = None
    error: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "input_smiles": self.input_smiles,
            "eligibility": self.eligibility.to_dict() if self.eligibility else None,
            "canonical_smiles": self.canonical_smiles,
            "pseudo_smiles": self.pseudo_smiles,
            "hash_key": self.hash_key,
            "rejected": self.rejected.to_dict() if self.rejected else None,
            "error": self.error,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "PreparationResult":
        el_raw = d.get("eligibility")
        rej_raw = d.get("rejected")
        return cls(
            success=d.get("success", False),
            input_smiles=d.get("input_smiles", ""),
            eligibility=EligibilityReport.from_dict(el_raw) if el_raw else None,
            canonical_smiles=d.get("canonical_smiles", ""),
            pseudo_smiles=d.get("pseudo_smiles", ""),
            hash_key=d.get("hash_key"),
            rejected=Rejected.from_dict(rej_raw) if rej_raw else None,
            error=d.get("error", ""),
        )
