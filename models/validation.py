"""Decision objects returned by the readiness gate and the pack validator."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True)
class ReadinessResult:
    """Outcome of the readiness gate for one purchase order."""

    ready: bool
    missing: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"ready": self.ready, "missing": list(self.missing)}


@dataclass(frozen=True)
class PackValidation:
    """
    Outcome of the pack pre-flight check.

    ``errors`` block generation; ``warnings`` are informational.
    """

    valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }
