"""
Common infrastructure — lookup tables, configuration, errors.
"""

from .constants import (
    VALID_ATOMIC_NUMBERS,
    HashDefaults,
    PlaceholderEntry,
    PlaceholderTable,
    PipelineConfig,
    get_pipeline_config,
    get_valid_atomic_numbers,
)
from .errors import (
    ErrorSeverity,
    FgPrepError,
    InputError,
    EligibilityError,
    NormalizationError,
    CodecError,
    CodecConsistencyError,
    ConfigurationError,
    ChemistryError,
)
