"""
Skill Base Class
================

A skill is a callable that takes loosely typed arguments (a dataclass, a
dict decoded from JSON, or an argparse namespace) and answers with a plain
JSON-ready dict, so the same object serves the command line and any
programmatic caller.  The dict is always a :class:`SkillResult`:

    {"success": bool, "data": {...}, "error": str}

Rejected molecules are not errors of the skill itself; they come back with
``success=False`` *and* a filled ``data`` payload explaining the rejection.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class SkillResult:
    """Envelope around a skill's payload."""

    success: bool
    data: Dict[str, Any] = field(default_factory=dict)
    error: str = ""

    @classmethod
    def ok(cls, data: Dict[str, Any]) -> "SkillResult":
        return cls(success=True, data=data)

    @classmethod
    def failure(cls, error: str, data: Optional[Dict[str, Any]] = None) -> "SkillResult":
        """Unsuccessful result; *data* may still describe what was found."""
        return cls(success=False, data=data or {}, error=error)

    def to_dict(self) -> Dict[str, Any]:
        return {"success": self.success, "data": self.data, "error": self.error}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "SkillResult":
        return cls(
            success=bool(d.get("success", False)),
            data=dict(d.get("data") or {}),
            error=d.get("error") or "",
        )


class BaseSkill(ABC):
    """Named unit of work; calling the skill runs :meth:`execute`."""

    name: str = ""
    description: str = ""

    @abstractmethod
    def execute(self, args: Any) -> Dict[str, Any]:
        """Return ``SkillResult.to_dict()`` for *args*."""

    def __call__(self, args: Any) -> Dict[str, Any]:
        return self.execute(args)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"
