"""
Validation Framework
====================

Structural validation of generated packages.

Components:
- PackageIssue: One problem, keyed by part and relationship id
- ValidationResult: Container for validation results
- PackageValidator: OPC/DOCX structural validator
"""

from docx_core.validation.base import (
    PackageIssue,
    ValidationResult,
)

from docx_core.validation.package_validator import (
    PackageValidator,
)

__all__ = [
    "PackageIssue",
    "ValidationResult",
    "PackageValidator",
]
