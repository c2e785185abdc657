"""
Molecular Parser & Copy Utilities
=================================
Entry points that turn SMILES into RDKit molecules for the preprocessing
pipeline, and the copy helpers the normalizer relies on.

Public API:
    parse_smiles(smiles)            → Optional[Mol]    (LRU-cached, private copy)
    parse_fragment_smiles(smiles)   → Optional[RWMol]  (unsanitized, explicit H kept)
    validate_smiles(smiles, fragment) → Tuple[bool, str] (safety checks)
    to_canonical_smiles(mol)        → str
    copy_molecule(mol)              → Mol              (deep copy incl. properties)
    copy_molecule_properties(src, dst) → None
    clear_cache()                   → None
"""

import re
from functools import lru_cache
from typing import Any, Optional, Tuple

from rdkit import Chem

from fgprep.common.errors import InputError

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_MAX_SMILES_LENGTH = 5000
_MAX_NESTING_DEPTH = 40  # max parenthesis / bracket nesting

# Characters that may legitimately appear in a SMILES string, including the
# '*' wildcard used for generic substituents.
_VALID_SMILES_CHARS = re.compile(
    r'^[A-Za-z0-9@+\-\[\]\(\)\.\#\=\:\%\/\\\*\$]+$'
)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

@lru_cache(maxsize=512)
def _parse_cached(smiles: str) -> Optional[Chem.Mol]:
    mol = Chem.MolFromSmiles(smiles)
    if mol is not None:
        try:
            Chem.SanitizeMol(mol)
        except Exception:
            return None
    return mol


def parse_smiles(smiles: str) -> Optional[Chem.Mol]:
    """Parse a SMILES string into a sanitized RDKit Mol.

    Parses are LRU-cached (maxsize=512), but every call returns its own
    copy: the pipeline mutates molecules in place, so the cached instance is
    never handed out.

    Returns ``None`` for invalid or empty SMILES.
    """
    if not smiles:
        return None
    mol = _parse_cached(smiles)
    if mol is None:
        return None
    return Chem.Mol(mol)


def parse_fragment_smiles(smiles: str) -> Optional[Chem.RWMol]:
    """Parse an extracted functional group without sanitization.

    Functional groups carry incomplete valences, aromatic atoms outside
    rings and explicit ``[H]`` atoms, all of which a sanitizing parse would
    reject or remove.  The property cache is refreshed leniently so hydrogen
    counts can be read.

    Returns ``None`` for unparsable or empty SMILES.
    """
    if not smiles:
        return None
    params = Chem.SmilesParserParams()
    params.sanitize = False
    params.removeHs = False
    mol = Chem.MolFromSmiles(smiles, params)
    if mol is None:
        return None
    mol.UpdatePropertyCache(strict=False)
    return Chem.RWMol(mol)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def _bracket_depth(smiles: str) -> Optional[int]:
    """Deepest parenthesis/bracket nesting, or None if they do not balance."""
    depth = deepest = 0
    for ch in smiles:
        if ch in "([":
            depth += 1
            deepest = max(deepest, depth)
        elif ch in ")]":
            depth -= 1
            if depth < 0:
                return None
    return deepest if depth == 0 else None


def validate_smiles(smiles: str, fragment: bool = False) -> Tuple[bool, str]:
    """Screen untrusted SMILES text before it reaches the parser.

    The first failing check gives the reason: blank input, more than
    ``_MAX_SMILES_LENGTH`` characters, characters outside the SMILES
    alphabet, unbalanced or overly nested parentheses and brackets, and
    finally a failed parse.  With ``fragment=True`` the parse is the
    lenient :func:`parse_fragment_smiles`, so open valences and aromatic
    atoms outside rings are accepted.

    Returns:
        ``(True, "")`` or ``(False, <reason>)``.
    """
    if not smiles or not smiles.strip():
        return False, "SMILES string is empty"
    if len(smiles) > _MAX_SMILES_LENGTH:
        return False, f"SMILES exceeds maximum length ({len(smiles)} > {_MAX_SMILES_LENGTH})"
    if _VALID_SMILES_CHARS.match(smiles) is None:
        return False, "SMILES contains invalid characters"

    depth = _bracket_depth(smiles)
    if depth is None:
        return False, "SMILES has unbalanced parentheses or brackets"
    if depth > _MAX_NESTING_DEPTH:
        return False, f"SMILES nesting depth too deep ({depth} > {_MAX_NESTING_DEPTH})"

    if fragment:
        if parse_fragment_smiles(smiles) is None:
            return False, "RDKit cannot parse this fragment SMILES"
    elif parse_smiles(smiles) is None:
        return False, "RDKit cannot parse this SMILES"
    return True, ""


# ---------------------------------------------------------------------------
# Output & copies
# ---------------------------------------------------------------------------

def to_canonical_smiles(mol: Chem.Mol) -> str:
    """Canonical isomeric SMILES of *mol* as written by RDKit."""
    if mol is None:
        raise InputError("MISSING_MOLECULE", "Given molecule is None")
    return Chem.MolToSmiles(mol)


def _set_typed_prop(target: Chem.Mol, name: str, value: Any) -> None:
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        target.SetBoolProp(name, value)
    elif isinstance(value, int):
        target.SetIntProp(name, value)
    elif isinstance(value, float):
        target.SetDoubleProp(name, value)
    else:
        target.SetProp(name, str(value))


def copy_molecule_properties(source: Chem.Mol, target: Chem.Mol) -> None:
    """Copy every molecule-level property of *source* onto *target*.

    Computed (cache) properties are skipped; the molecule title (``_Name``)
    and other private properties are kept.
    """
    if source is None or target is None:
        raise InputError("MISSING_MOLECULE", "Given molecule is None")
    props = source.GetPropsAsDict(includePrivate=True, includeComputed=False)
    for name, value in props.items():
        _set_typed_prop(target, name, value)


def copy_molecule(mol: Chem.Mol) -> Chem.Mol:
    """Deep copy of *mol*; original and copy share no atoms or bonds.

    Molecule-level properties are transferred explicitly so the copy keeps
    them even where RDKit's copy constructor would not.
    """
    if mol is None:
        raise InputError("MISSING_MOLECULE", "Given molecule is None")
    clone = Chem.Mol(mol)
    copy_molecule_properties(mol, clone)
    return clone


# ---------------------------------------------------------------------------
# Cache management
# ---------------------------------------------------------------------------

def clear_cache() -> None:
    """Clear the LRU caches (useful for testing or memory management)."""
    _parse_cached.cache_clear()
