"""
Centralized Configuration Registry
====================================

Single source of truth for the process-wide lookup tables used by the
eligibility filter, the normalizer and the pseudo-SMILES codec.

The tables are immutable and built once; callers receive them through
:func:`get_pipeline_config` and pass the returned object on explicitly.

Usage::

    from fgprep.common.constants import get_pipeline_config

    config = get_pipeline_config()
    if atom.GetAtomicNum() not in config.valid_atomic_numbers:
        ...
    entry = config.placeholders.for_source("C")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
import re
from typing import Dict, FrozenSet, Optional, Pattern, Tuple

from .errors import ConfigurationError


# ---------------------------------------------------------------------------
# Valid atomic numbers
# ---------------------------------------------------------------------------

VALID_ATOMIC_NUMBERS: Tuple[int, ...] = (
    1, 2, 6, 7, 8, 9, 10, 15, 16, 17, 18, 34, 35, 36, 53, 54, 86,
)
"""Non-metals accepted by the functional-group finder.

Everything else is a metal, a metalloid or a pseudo atom (``*``, atomic
number 0) and makes a molecule ineligible.
"""


def get_valid_atomic_numbers() -> Tuple[int, ...]:
    """Return the atomic numbers accepted by the functional-group finder."""
    return tuple(VALID_ATOMIC_NUMBERS)


# ---------------------------------------------------------------------------
# Placeholder table
# ---------------------------------------------------------------------------

GENERIC_SUBSTITUENT = "R"
"""Source key of the table entry for generic (undefined) substituents."""


@dataclass(frozen=True)
class PlaceholderEntry:
    """One row of the placeholder table.

    Attributes:
        source: Element symbol of the aromatic atom, or ``"R"`` for a
            generic substituent.
        placeholder: Rare element symbol carried through canonicalization.
        rendering: Pseudo-SMILES text written in place of the placeholder.
    """

    source: str
    placeholder: str
    rendering: str

    @property
    def bracket_pattern(self) -> Pattern[str]:
        """Placeholder written as a bracket atom, e.g. ``[Ce]`` or ``[CeH]``."""
        return re.compile(r"\[\d*" + re.escape(self.placeholder) + r"(?![a-z])[^\]]*\]")

    @property
    def bare_pattern(self) -> Pattern[str]:
        """Placeholder written without brackets."""
        return re.compile(re.escape(self.placeholder) + r"(?![a-z])")

    def matches(self, token: str) -> bool:
        """Whether an atom token of generated SMILES is this placeholder.

        The bracketed form is tried first, then the bare form.
        """
        return bool(self.bracket_pattern.fullmatch(token)
                    or self.bare_pattern.fullmatch(token))


_DEFAULT_PLACEHOLDER_ENTRIES: Tuple[PlaceholderEntry, ...] = (
    PlaceholderEntry("C", "Ce", "C*"),
    PlaceholderEntry("N", "Nd", "N*"),
    PlaceholderEntry("S", "Sm", "S*"),
    PlaceholderEntry("O", "Os", "O*"),
    PlaceholderEntry("Se", "Sc", "Se*"),
    PlaceholderEntry("P", "Pm", "P*"),
    PlaceholderEntry(GENERIC_SUBSTITUENT, "Es", "R"),
)


@dataclass(frozen=True)
class PlaceholderTable:
    """Bijective mapping between pseudo-SMILES sources and placeholder elements.

    Construction fails with :class:`ConfigurationError` if two entries share
    a source or a placeholder symbol, or if any placeholder symbol is also a
    source symbol.
    """

    entries: Tuple[PlaceholderEntry, ...] = _DEFAULT_PLACEHOLDER_ENTRIES
    _by_source: Dict[str, PlaceholderEntry] = field(
        init=False, repr=False, compare=False)
    _by_placeholder: Dict[str, PlaceholderEntry] = field(
        init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        by_source: Dict[str, PlaceholderEntry] = {}
        by_placeholder: Dict[str, PlaceholderEntry] = {}
        for entry in self.entries:
            if entry.source in by_source:
                raise ConfigurationError(
                    "DUPLICATE_SOURCE",
                    f"Source symbol {entry.source!r} is mapped twice",
                )
            if entry.placeholder in by_placeholder:
                raise ConfigurationError(
                    "DUPLICATE_PLACEHOLDER",
                    f"Placeholder symbol {entry.placeholder!r} is used twice",
                )
            by_source[entry.source] = entry
            by_placeholder[entry.placeholder] = entry
        overlap = set(by_source) & set(by_placeholder)
        if overlap:
            raise ConfigurationError(
                "PLACEHOLDER_COLLISION",
                f"Symbols used both as source and placeholder: {sorted(overlap)}",
            )
        object.__setattr__(self, "_by_source", by_source)
        object.__setattr__(self, "_by_placeholder", by_placeholder)

    @property
    def sources(self) -> FrozenSet[str]:
        return frozenset(self._by_source)

    @property
    def placeholders(self) -> FrozenSet[str]:
        return frozenset(self._by_placeholder)

    def for_source(self, symbol: str) -> Optional[PlaceholderEntry]:
        """Entry for an aromatic element symbol (or ``"R"``), if any."""
        return self._by_source.get(symbol)

    def for_placeholder(self, symbol: str) -> Optional[PlaceholderEntry]:
        """Entry for a placeholder element symbol, if any."""
        return self._by_placeholder.get(symbol)

    @property
    def generic(self) -> PlaceholderEntry:
        return self._by_source[GENERIC_SUBSTITUENT]


# ---------------------------------------------------------------------------
# Functional-group hashing
# ---------------------------------------------------------------------------

class HashDefaults:
    """Discriminating features used to deduplicate functional groups."""

    DEPTH: int = 8                 # neighbourhood radius
    AROMATIC_SEED: int = 3         # contributed by aromatic atoms
    NON_AROMATIC_SEED: int = 2     # contributed by all other atoms


# ---------------------------------------------------------------------------
# Pipeline configuration
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PipelineConfig:
    """Immutable configuration shared by the filter, normalizer and codec.

    Attributes:
        valid_atomic_numbers: Atomic numbers accepted by the finder.
        placeholders: Placeholder table for the pseudo-SMILES codec.
        fail_closed: Whether composite eligibility checks swallow internal
            failures (reject / not ready) instead of raising.
    """

    valid_atomic_numbers: FrozenSet[int] = frozenset(VALID_ATOMIC_NUMBERS)
    placeholders: PlaceholderTable = field(default_factory=PlaceholderTable)
    fail_closed: bool = True


@lru_cache(maxsize=1)
def get_pipeline_config() -> PipelineConfig:
    """Build the process-wide configuration once and return it on every call."""
    return PipelineConfig()
