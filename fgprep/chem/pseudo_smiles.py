"""
Pseudo-SMILES Codec
===================
Renders a molecule (typically an extracted functional group) as
pseudo-SMILES: canonical SMILES in which aromatic atoms are written as an
upper-case symbol followed by ``*`` (``C*``, ``N*``, ``O*``, ``S*``,
``Se*``, ``P*``) and generic substituents as ``R``.

RDKit's canonical writer cannot emit these markers, so they are carried
through it on placeholder elements:

1. Forward substitution: every aromatic atom whose element is in the
   placeholder table, and every generic substituent (atomic number 0), is
   replaced in the graph by a rare element (``Ce``, ``Nd``, ``Es``, ...)
   holding the same hydrogen count.  Bonds are kept.  Originals are
   recorded by atom index in a snapshot of the molecule.
2. Canonicalization and text restoration: the placeholder-bearing
   molecule is written as canonical SMILES.  Tokens are matched to atoms
   through RDKit's atom output order, so a real atom of a placeholder
   element is never mistaken for a placeholder.  Each placeholder token
   is replaced by its pseudo-SMILES rendering and every other atom is
   written as RDKit writes it in the original molecule, since atoms next
   to a placeholder come out of the writer bracketed (``[O]``).
3. Graph restoration: every placeholder atom is replaced by its original
   again.  This runs even when step 2 fails.

An aromatic atom is bracketed in pseudo-SMILES when RDKit brackets the
original atom, or when it carries no hydrogens and its bonds do not reach
any allowed valence of its element.  RDKit writes a hydrogen-free ``[c]``
bare, so the second rule keeps its open valence visible::

    *n(*)*     → RN*(R)R
    [H]O[c]    → [H]O[C*]
    [c]=O      → O=[C*]
    [se]       → [Se*]
    *OC(*)=O   → O=C(R)OR

Atom order follows RDKit's canonical ranking, which starts from the
lowest-degree atom.

Not thread-safe per molecule: between steps 1 and 3 an ``RWMol`` argument
is observably rewritten, and any concurrent reader or writer of the same
molecule sees placeholders or breaks the restoration.

Public API:
    placeholder_substitution(mol, table)  → context manager (steps 1 and 3)
    create_pseudo_smiles(mol)             → str
    is_generic_substituent(atom)          → bool
"""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from rdkit import Chem

from fgprep.common.constants import (
    PipelineConfig,
    PlaceholderEntry,
    PlaceholderTable,
    get_pipeline_config,
)
from fgprep.common.errors import CodecConsistencyError, CodecError, InputError

logger = logging.getLogger(__name__)

# One match per atom, in the order RDKit writes atoms.
_ATOM_TOKEN = re.compile(r"\[[^\]]*\]|Br|Cl|[BCNOPSFI]|[bcnops]|\*")
_BRACKET_ATOM = re.compile(r"^\[(\d*)([A-Za-z][a-z]?)(.*)\]$")

_OUTPUT_ORDER_PROP = "_smilesAtomOutputOrder"


@dataclass
class _Substitution:
    """A placeholder atom standing in the graph for the original at ``index``."""

    index: int
    entry: PlaceholderEntry
    rendering: str


class _Substitutions(Dict[int, _Substitution]):
    """Substitutions keyed by atom index.

    ``tokens`` holds how RDKit writes every atom of the molecule before
    substitution; it is empty when nothing was substituted.
    """

    def __init__(self) -> None:
        super().__init__()
        self.tokens: Dict[int, str] = {}


def is_generic_substituent(atom: Chem.Atom) -> bool:
    """True if *atom* is an undefined attachment point (``*``)."""
    if atom is None:
        raise InputError("MISSING_ATOM", "Given atom is None")
    return atom.GetAtomicNum() == 0


# ---------------------------------------------------------------------------
# Token helpers
# ---------------------------------------------------------------------------

def _output_order(mol: Chem.Mol) -> List[int]:
    raw = mol.GetProp(_OUTPUT_ORDER_PROP)
    if not isinstance(raw, str):
        return [int(i) for i in raw]
    return [int(i) for i in raw.strip("[]").split(",") if i.strip()]


def _tokens_by_atom(mol: Chem.Mol) -> Dict[int, str]:
    """How RDKit writes each atom of *mol* in (non-canonical) SMILES."""
    smiles = Chem.MolToSmiles(mol, canonical=False)
    order = _output_order(mol)
    tokens = _ATOM_TOKEN.findall(smiles)
    if len(tokens) != len(order):
        raise CodecError(
            "TOKEN_MISMATCH",
            f"Found {len(tokens)} atom tokens for {len(order)} atoms in {smiles!r}",
        )
    return dict(zip(order, tokens))


def _has_open_valence(atom: Chem.Atom) -> bool:
    """True for a hydrogen-free atom whose bonds fill none of its valences."""
    if atom.GetTotalNumHs() > 0:
        return False
    allowed = [v for v in Chem.GetPeriodicTable().GetValenceList(atom.GetAtomicNum()) if v >= 0]
    return atom.GetValence(Chem.ValenceType.EXPLICIT) not in allowed


def _render(entry: PlaceholderEntry, atom: Chem.Atom, original_token: str,
            generic: bool) -> str:
    if generic:
        return entry.rendering
    match = _BRACKET_ATOM.match(original_token)
    if match is not None:
        isotope, _, rest = match.groups()
        return f"[{isotope}{entry.rendering}{rest}]"
    if _has_open_valence(atom):
        return f"[{entry.rendering}]"
    return entry.rendering


# ---------------------------------------------------------------------------
# Phases 1 and 3
# ---------------------------------------------------------------------------

def _substitute(
    mol: Chem.RWMol,
    table: PlaceholderTable,
    substitutions: _Substitutions,
) -> None:
    candidates = []
    for atom in mol.GetAtoms():
        generic = is_generic_substituent(atom)
        if generic:
            entry = table.generic
        elif atom.GetIsAromatic():
            entry = table.for_source(atom.GetSymbol())
        else:
            entry = None
        if entry is not None:
            candidates.append((atom.GetIdx(), entry, generic))
    if not candidates:
        return

    substitutions.tokens = tokens = _tokens_by_atom(mol)
    # valences are read before the first replacement
    planned = []
    for idx, entry, generic in candidates:
        original = mol.GetAtomWithIdx(idx)
        planned.append((idx, entry, original.GetTotalNumHs(),
                        _render(entry, original, tokens[idx], generic)))
    for idx, entry, hydrogens, rendering in planned:
        if idx >= mol.GetNumAtoms():
            raise CodecConsistencyError(
                "PLACEHOLDER_MISSING", f"Atom {idx} disappeared before substitution")
        placeholder = Chem.Atom(entry.placeholder)
        placeholder.SetNumExplicitHs(hydrogens)
        placeholder.SetNoImplicit(True)
        mol.ReplaceAtom(idx, placeholder)
        substitutions[idx] = _Substitution(idx, entry, rendering)
    logger.debug("Substituted %d of %d atoms with placeholders",
                 len(substitutions), mol.GetNumAtoms())


def _restore(
    mol: Chem.RWMol,
    originals: Chem.Mol,
    substitutions: Dict[int, _Substitution],
) -> None:
    missing = []
    for idx in sorted(substitutions):
        entry = substitutions[idx].entry
        if (idx >= mol.GetNumAtoms()
                or mol.GetAtomWithIdx(idx).GetSymbol() != entry.placeholder):
            missing.append(idx)
            continue
        mol.ReplaceAtom(idx, originals.GetAtomWithIdx(idx))
        del substitutions[idx]
    mol.UpdatePropertyCache(strict=False)
    if missing:
        raise CodecConsistencyError(
            "PLACEHOLDER_MISSING",
            f"Placeholder atoms {missing} were modified while the molecule was being encoded",
        )


@contextmanager
def placeholder_substitution(
    mol: Chem.RWMol,
    table: Optional[PlaceholderTable] = None,
) -> Iterator[_Substitutions]:
    """Temporarily replace aromatic and generic atoms of *mol* by placeholders.

    Yields the substitutions keyed by atom index; their ``tokens`` attribute
    holds how RDKit wrote each atom before substitution.  On exit, successful or
    not, every recorded placeholder is replaced by its original atom and the
    molecule's atoms, bonds and per-atom fields are as they were before
    entry.

    Raises:
        InputError: If *mol* is None or not an ``RWMol``.
        CodecConsistencyError: If a placeholder atom was changed by someone
            else before it could be restored.
    """
    if mol is None:
        raise InputError("MISSING_MOLECULE", "Given molecule is None")
    if not isinstance(mol, Chem.RWMol):
        raise InputError(
            "INVALID_MOLECULE_TYPE",
            f"Placeholder substitution needs an editable RWMol, got {type(mol).__name__}",
        )
    table = table or get_pipeline_config().placeholders
    mol.UpdatePropertyCache(strict=False)
    originals = Chem.RWMol(mol)
    substitutions = _Substitutions()
    try:
        _substitute(mol, table, substitutions)
        yield substitutions
    finally:
        _restore(mol, originals, substitutions)


# ---------------------------------------------------------------------------
# Phase 2
# ---------------------------------------------------------------------------

def _restore_text(
    smiles: str,
    order: List[int],
    substitutions: _Substitutions,
) -> str:
    positions = iter(order)

    def _replace(match) -> str:
        token = match.group(0)
        idx = next(positions, None)
        if idx is None:
            raise CodecError("TOKEN_MISMATCH", f"More atom tokens than atoms in {smiles!r}")
        substitution = substitutions.get(idx)
        if substitution is None:
            # stereo marks depend on the canonical neighbour order
            if "@" in token:
                return token
            return substitutions.tokens.get(idx, token)
        if not substitution.entry.matches(token):
            raise CodecConsistencyError(
                "PLACEHOLDER_MISSING",
                f"Expected placeholder {substitution.entry.placeholder} for atom {idx}, found {token}",
            )
        return substitution.rendering

    restored = _ATOM_TOKEN.sub(_replace, smiles)
    if next(positions, None) is not None:
        raise CodecError("TOKEN_MISMATCH", f"Fewer atom tokens than atoms in {smiles!r}")
    return restored


def create_pseudo_smiles(
    mol: Chem.Mol,
    config: Optional[PipelineConfig] = None,
) -> str:
    """Pseudo-SMILES of *mol*.

    An ``RWMol`` is rewritten in place and restored before returning; any
    other ``Mol`` is encoded through an editable copy and never touched.

    Raises:
        InputError: If *mol* is None.
        CodecError: If RDKit cannot write the placeholder-bearing molecule.
        CodecConsistencyError: If the molecule was mutated concurrently.
    """
    if mol is None:
        raise InputError("MISSING_MOLECULE", "Given molecule is None")
    config = config or get_pipeline_config()
    work = mol if isinstance(mol, Chem.RWMol) else Chem.RWMol(mol)
    with placeholder_substitution(work, config.placeholders) as substitutions:
        try:
            smiles = Chem.MolToSmiles(work)
        except Exception as exc:
            raise CodecError(
                "CANONICALIZATION_FAILED", f"RDKit could not write SMILES: {exc}"
            ) from exc
        if not substitutions:
            return smiles
        return _restore_text(smiles, _output_order(work), substitutions)
