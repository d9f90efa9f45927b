"""
errors/aggregator.py - Collect warnings from several engine components.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List

from .taxonomy import EngineWarning, WarningCode, WarningSeverity


@dataclass
class ErrorReport:
    """Aggregated warning report."""

    total_warnings: int = 0
    by_severity: Dict[str, int] = field(default_factory=dict)
    by_code: Dict[str, int] = field(default_factory=dict)
    summary: str = ""
    all_warnings: List[EngineWarning] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_warnings": self.total_warnings,
            "by_severity": self.by_severity,
            "by_code": self.by_code,
            "summary": self.summary,
            "warnings": [w.to_dict() for w in self.all_warnings],
        }


class ErrorAggregator:
    """
    Aggregates warnings from multiple sources.

    Duplicate warnings (same code, source and ingredient) are kept once.
    """

    def __init__(self):
        self._warnings: List[EngineWarning] = []
        self._by_source: Dict[str, List[EngineWarning]] = {}

    def add(self, warning: EngineWarning) -> None:
        """Add a warning."""
        if warning in self._warnings:
            return
        self._warnings.append(warning)
        self._by_source.setdefault(warning.source, []).append(warning)

    def add_all(self, warnings: Iterable[EngineWarning]) -> None:
        """Add multiple warnings."""
        for warning in warnings:
            self.add(warning)

    @property
    def warnings(self) -> List[EngineWarning]:
        return list(self._warnings)

    def get_by_severity(self, severity: WarningSeverity) -> List[EngineWarning]:
        """Get warnings by severity."""
        return [w for w in self._warnings if w.severity == severity]

    def get_by_code(self, code: WarningCode) -> List[EngineWarning]:
        """Get warnings by code."""
        return [w for w in self._warnings if w.code == code]

    def get_by_source(self, source: str) -> List[EngineWarning]:
        """Get warnings by source."""
        return list(self._by_source.get(source, []))

    def has_warnings(self) -> bool:
        """Check if anything above INFO was collected."""
        return any(w.severity != WarningSeverity.INFO for w in self._warnings)

    def generate_report(self) -> ErrorReport:
        """Generate aggregated report."""
        report = ErrorReport(total_warnings=len(self._warnings))

        for severity in WarningSeverity:
            count = sum(1 for w in self._warnings if w.severity == severity)
            if count > 0:
                report.by_severity[severity.value] = count

        for code in WarningCode:
            count = sum(1 for w in self._warnings if w.code == code)
            if count > 0:
                report.by_code[code.value] = count

        if report.by_severity.get("warning", 0) > 0:
            report.summary = f"{report.by_severity['warning']} warning(s) found"
        elif report.by_severity.get("advisory", 0) > 0:
            report.summary = f"{report.by_severity['advisory']} advisory note(s)"
        else:
            report.summary = "No significant issues"

        report.all_warnings = list(self._warnings)
        return report

    def clear(self) -> None:
        """Clear all warnings."""
        self._warnings.clear()
        self._by_source.clear()
