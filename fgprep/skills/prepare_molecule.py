"""
Prepare Molecule Skill
======================

Skill wrapper around the preprocessing pipeline.  A whole molecule is
parsed, checked for eligibility, normalized and encoded; an extracted
functional group (``fragment=True``) is only parsed leniently and encoded.
Either way the caller gets a :class:`SkillResult` envelope holding a
:class:`PreparationResult`.

Command line::

    fgprep "CC[O-].[Na+]" --aromaticity mdl
    fgprep "*n(*)*" --fragment
"""

from __future__ import annotations

import argparse
import json
import logging
from typing import Any, Dict, List, Optional

from fgprep.chem.eligibility import assess_eligibility
from fgprep.chem.fg_hash import generate_hash
from fgprep.chem.mol_parser import (
    parse_fragment_smiles,
    parse_smiles,
    to_canonical_smiles,
    validate_smiles,
)
from fgprep.chem.normalizer import AROMATICITY_MODELS, normalize_for_analysis
from fgprep.chem.pseudo_smiles import create_pseudo_smiles
from fgprep.models import PrepareArgs, PreparationResult, Rejected
from fgprep.skills.base import BaseSkill, SkillResult

logger = logging.getLogger(__name__)


class PrepareMoleculeSkill(BaseSkill):
    """Normalize a molecule and encode it as pseudo-SMILES with a hash key."""

    name = "prepare_molecule"
    description = "Check, normalize and encode a molecule for functional-group extraction"

    def execute(self, args: Any) -> Dict[str, Any]:
        """Run the pipeline and return a SkillResult dict.

        Args:
            args: A :class:`PrepareArgs`, a dict with a ``smiles`` key, or
                  any object with a ``.smiles`` attribute.

        Returns:
            ``SkillResult.to_dict()`` with a :class:`PreparationResult` under
            ``data``.  Rejected molecules give ``success=False`` with the
            rejection stage and reason in ``data["rejected"]``.
        """
        if isinstance(args, PrepareArgs):
            prepare_args = args
        elif isinstance(args, dict):
            prepare_args = PrepareArgs.from_dict(args)
        elif hasattr(args, "smiles"):
            prepare_args = PrepareArgs(
                smiles=args.smiles,
                aromaticity_model=getattr(args, "aromaticity_model", "default"),
                fragment=getattr(args, "fragment", False),
            )
        else:
            return SkillResult.failure("Invalid args: expected 'smiles'").to_dict()

        smiles = prepare_args.smiles
        if not smiles or not smiles.strip():
            return SkillResult.failure("Empty SMILES string").to_dict()

        valid, reason = validate_smiles(smiles, fragment=prepare_args.fragment)
        if not valid:
            return SkillResult.failure(f"Invalid SMILES: {reason}").to_dict()

        model = AROMATICITY_MODELS.get(prepare_args.aromaticity_model)
        if model is None:
            return SkillResult.failure(
                f"Unknown aromaticity model: {prepare_args.aromaticity_model}"
            ).to_dict()

        try:
            if prepare_args.fragment:
                result = self._encode_fragment(smiles)
            else:
                result = self._prepare(smiles, model)
        except Exception as exc:
            logger.exception("prepare_molecule failed for %s", smiles)
            return SkillResult.failure(str(exc)).to_dict()

        if not result.success:
            return SkillResult.failure(result.error, result.to_dict()).to_dict()
        return SkillResult.ok(result.to_dict()).to_dict()

    # ------------------------------------------------------------------
    # Pipelines
    # ------------------------------------------------------------------

    @staticmethod
    def _encode_fragment(smiles: str) -> PreparationResult:
        group = parse_fragment_smiles(smiles)
        if group is None:
            return PreparationResult(
                input_smiles=smiles, error=f"Cannot parse fragment SMILES: {smiles}")
        return PreparationResult(
            success=True,
            input_smiles=smiles,
            canonical_smiles=to_canonical_smiles(group),
            pseudo_smiles=create_pseudo_smiles(group),
            hash_key=generate_hash(group),
        )

    @staticmethod
    def _prepare(smiles: str, model) -> PreparationResult:
        mol = parse_smiles(smiles)
        if mol is None:
            return PreparationResult(
                input_smiles=smiles, error=f"Cannot parse SMILES: {smiles}")

        report = assess_eligibility(mol)
        outcome = normalize_for_analysis(mol, model)
        if isinstance(outcome, Rejected):
            logger.info("Rejected %s at %s: %s", smiles, outcome.stage, outcome.reason)
            return PreparationResult(
                input_smiles=smiles,
                eligibility=report,
                rejected=outcome,
                error=f"Rejected ({outcome.stage}): {outcome.reason}",
            )

        return PreparationResult(
            success=True,
            input_smiles=smiles,
            eligibility=report,
            canonical_smiles=to_canonical_smiles(outcome),
            pseudo_smiles=create_pseudo_smiles(outcome),
            hash_key=generate_hash(outcome),
        )


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(
        description="Normalize a molecule and encode it as pseudo-SMILES."
    )
    parser.add_argument("smiles", help="Input SMILES")
    parser.add_argument("--fragment", action="store_true",
                        help="Treat the input as an extracted functional group")
    parser.add_argument("--aromaticity", default="default",
                        choices=sorted(AROMATICITY_MODELS),
                        help="Aromaticity model applied after normalization")
    parser.add_argument("--verbose", action="store_true", help="Log debug output")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )
    result = PrepareMoleculeSkill()(PrepareArgs(
        smiles=args.smiles,
        aromaticity_model=args.aromaticity,
        fragment=args.fragment,
    ))
    print(json.dumps(result, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
