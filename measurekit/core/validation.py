"""
Custom unit validation.

Validation never raises: each check returns a ValidationResult that the
state store hands back to its caller unchanged. A rejected unit leaves the
store untouched.
"""

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from measurekit.core.catalog import UnitCatalog
from measurekit.core.types import CustomUnit


logger = logging.getLogger(__name__)


class ValidationCode(Enum):
    """Reason a custom unit was rejected."""
    INVALID_MULTIPLIER = "invalid_multiplier"
    DUPLICATE_SYMBOL = "duplicate_symbol"
    UNSUPPORTED_CATEGORY = "unsupported_category"


MESSAGES = {
    ValidationCode.INVALID_MULTIPLIER: "Multiplier must be greater than zero.",
    ValidationCode.DUPLICATE_SYMBOL: "A unit with this symbol already exists.",
    ValidationCode.UNSUPPORTED_CATEGORY: "Custom units are not supported in this category.",
}


@dataclass
class ValidationIssue:
    """A single validation issue."""
    code: ValidationCode
    field: str
    message: str
    value: float | str | None = None

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


@dataclass
class ValidationResult:
    """Outcome of a custom unit add/update."""
    is_valid: bool
    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def error(self) -> ValidationCode | None:
        """First rejection reason, None on success."""
        if self.issues:
            return self.issues[0].code
        return None

    def __bool__(self) -> bool:
        return self.is_valid

    def __str__(self) -> str:
        if self.is_valid:
            return "✓ Unit valid"
        return "\n".join(str(issue) for issue in self.issues)


def _failure(code: ValidationCode, field_name: str, value: float | str | None) -> ValidationResult:
    return ValidationResult(
        is_valid=False,
        issues=[ValidationIssue(code=code, field=field_name, message=MESSAGES[code], value=value)],
    )


# =============================================================================
# Validation Functions
# =============================================================================

def validate_multiplier(multiplier: float) -> ValidationResult:
    """Multiplier must be a finite number > 0."""
    if not math.isfinite(multiplier) or multiplier <= 0:
        return _failure(ValidationCode.INVALID_MULTIPLIER, "multiplier_to_base", multiplier)
    return ValidationResult(is_valid=True)


def validate_custom_unit(unit: CustomUnit, catalog: UnitCatalog,
                         custom_units: Iterable[CustomUnit],
                         is_update: bool = False) -> ValidationResult:
    """
    Validate a custom unit before it is inserted or replaced.

    Checks, in order: multiplier, symbol conflict, category support.

    Args:
        unit: Unit to validate
        catalog: Catalog providing predefined symbols
        custom_units: Custom units currently stored
        is_update: Exclude the unit's own id from the symbol check

    Returns:
        ValidationResult, falsy when the unit is rejected
    """
    result = validate_multiplier(unit.multiplier_to_base)
    if not result:
        logger.info("Rejected custom unit %r: invalid multiplier %r", unit.name, unit.multiplier_to_base)
        return result

    excluding_id = unit.id if is_update else None
    if catalog.has_symbol_conflict(unit.symbol, unit.category, custom_units, excluding_id=excluding_id):
        logger.info("Rejected custom unit %r: symbol %r already in use", unit.name, unit.symbol)
        return _failure(ValidationCode.DUPLICATE_SYMBOL, "symbol", unit.symbol)

    if not catalog.supports_custom_units(unit.category):
        logger.info("Rejected custom unit %r: category %s is not linear", unit.name, unit.category.value)
        return _failure(ValidationCode.UNSUPPORTED_CATEGORY, "category", unit.category.value)

    return ValidationResult(is_valid=True)
