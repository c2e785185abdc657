"""
Unified Error Hierarchy
=======================
Exception-based error system for all fgprep modules.

Three families matter to callers:

- input errors (:class:`InputError`) — a molecule or atom is missing or of
  the wrong type; raised immediately, never defaulted.
- normalization errors (:class:`NormalizationError`) — the valence model
  could not type or saturate an atom; recoverable as "molecule rejected".
- codec errors (:class:`CodecError`, :class:`CodecConsistencyError`) — the
  canonicalization engine rejected a molecule, or a placeholder atom vanished
  between substitution and restoration (caller mutated the molecule
  concurrently).
"""

from enum import Enum
from typing import Any, Dict


class ErrorSeverity(Enum):
    """Error severity levels for the unified error system."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class FgPrepError(Exception):
    """Unified error base class for all fgprep errors.

    Attributes:
        code: Machine-readable error code (e.g. "MISSING_MOLECULE").
        message: Human-readable error description.
        severity: Error severity level.
    """

    def __init__(
        self,
        code: str,
        message: str,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
    ):
        self.code = code
        self.message = message
        self.severity = severity
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-compatible dictionary."""
        return {
            "code": self.code,
            "message": self.message,
            "severity": self.severity.value,
        }


class InputError(FgPrepError):
    """Raised when a required molecule or atom is absent or malformed."""
    pass


class EligibilityError(FgPrepError):
    """Raised by composite eligibility checks when fail-closed mode is off."""
    pass


class NormalizationError(FgPrepError):
    """Raised when atom typing or hydrogen saturation fails during normalization."""
    pass


class CodecError(FgPrepError):
    """Raised when a molecule cannot be rendered as pseudo-SMILES."""
    pass


class CodecConsistencyError(CodecError):
    """Raised when a placeholder atom is no longer where the codec left it."""

    def __init__(self, code: str, message: str,
                 severity: ErrorSeverity = ErrorSeverity.HIGH):
        super().__init__(code, message, severity)


class ConfigurationError(FgPrepError):
    """Raised when a lookup table violates its bijection constraints."""
    pass


class ChemistryError(FgPrepError):
    """Raised when an RDKit parse or chemistry operation fails."""
    pass
