"""
Validation Results
==================

Issues found while reading a package back, keyed by the part they were
found in and, for relationship problems, by the relationship id.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class PackageIssue:
    """
    One problem found in a package.

    Attributes:
        part: Logical name of the part the problem was found in
        kind: Category ("Content Types", "Dangling Reference", ...)
        message: Description
        r_id: Relationship id involved, if any
        severity: 'Error' or 'Warning'
    """
    part: str
    kind: str
    message: str
    r_id: Optional[str] = None
    severity: str = "Error"

    def __str__(self) -> str:
        where = f"{self.part} [{self.r_id}]" if self.r_id else self.part
        return f"{where}: {self.message}"


@dataclass
class ValidationResult:
    """
    Container for validation results.

    Attributes:
        is_valid: Whether validation passed (warnings do not count)
        error_count: Total number of errors
        warning_count: Total number of warnings
        issues: Every issue in the order it was found
        metadata: Facts gathered on the way (part count, main document ...)
    """
    is_valid: bool = True
    error_count: int = 0
    warning_count: int = 0
    issues: List[PackageIssue] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def add_issue(self,
                  part: str,
                  message: str,
                  kind: str,
                  r_id: Optional[str] = None,
                  severity: str = "Error") -> PackageIssue:
        """Record an issue and update the counters."""
        issue = PackageIssue(part, kind, message, r_id, severity)
        self.issues.append(issue)

        if severity == "Error":
            self.error_count += 1
            self.is_valid = False
        elif severity == "Warning":
            self.warning_count += 1
        return issue

    @property
    def errors(self) -> List[PackageIssue]:
        return [issue for issue in self.issues if issue.severity == "Error"]

    def issues_for_part(self, part: str) -> List[PackageIssue]:
        return [issue for issue in self.issues if issue.part == part]

    def get_errors_by_type(self) -> Dict[str, int]:
        """Get error counts by kind."""
        by_kind: Dict[str, int] = {}
        for issue in self.errors:
            by_kind[issue.kind] = by_kind.get(issue.kind, 0) + 1
        return by_kind

    def summary(self) -> str:
        """Generate a text summary of validation results."""
        if self.is_valid:
            return "Validation PASSED - No errors found"

        lines = [
            f"Validation FAILED - {self.error_count} error(s), {self.warning_count} warning(s)",
            "",
            "Errors by type:",
        ]

        for kind, count in sorted(self.get_errors_by_type().items(), key=lambda x: -x[1]):
            lines.append(f"  {kind}: {count}")

        lines.extend(["", "First errors:"])
        for issue in self.errors[:5]:
            lines.append(f"  {issue}")

        return "\n".join(lines)
