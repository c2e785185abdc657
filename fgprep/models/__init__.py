"""
Typed dataclass definitions shared across all tool modules.

Re-exports every model so callers can do::

    from fgprep.models import AtomSnapshot, EligibilityReport, Rejected
"""

from .chem_models import AtomSnapshot, EligibilityReport, Rejected, FunctionalGroupCount
from .skill_models import PrepareArgs, PreparationResult
