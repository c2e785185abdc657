"""
fgprep — preprocessing and pseudo-SMILES encoding for functional-group extraction.

Organized into:
- common/ : immutable lookup tables, pipeline configuration, errors
- models/ : typed dataclass definitions
- chem/   : RDKit chemistry tools (parsing, eligibility, normalization,
            pseudo-SMILES codec, functional-group hashing)
- skills/ : skill wrappers and the command-line entry point
"""

__version__ = "1.0.0"
