"""
Chemistry operations for fgprep.

RDKit-backed modules that prepare molecules for functional-group
extraction and encode the extracted groups:

- mol_parser:     SMILES parsing (sanitized and fragment mode), validation, copies
- eligibility:    Side-effect-free accept / reject / needs-normalization predicates
- normalizer:     Largest fragment, charge neutralization, aromaticity perception
- pseudo_smiles:  Placeholder codec rendering groups as pseudo-SMILES (C*, N*, R)
- fg_hash:        Hash scheme and deduplicating counter for functional groups
"""
