"""
Skills — callable entry points of fgprep.

Each skill extends :class:`BaseSkill` and implements ``execute(args) -> dict``.
"""

from fgprep.skills.base import BaseSkill, SkillResult
from fgprep.skills.prepare_molecule import PrepareMoleculeSkill

__all__ = [
    "BaseSkill",
    "SkillResult",
    "PrepareMoleculeSkill",
]
