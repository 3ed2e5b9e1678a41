# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Condition Operators

Comparison rules for conditional nodes. Configured operands usually arrive as
strings from the editor, so comparisons coerce loosely: "1" equals 1,
"10" is greater than 9.

Text coercion goes through interpolation.stringify, the same rendering used
for {{path}} templates. A missing value reads as "" and a dict or list reads
as its compact JSON, so [1] equals "[1]" but not "1", and "contains" never
matches a non-empty operand against a missing value.
"""

import math
from typing import Any, Callable, Dict

from .interpolation import stringify


def to_number(value: Any) -> float:
    """Numeric cast. Returns NaN for anything without a numeric reading."""
    if value is None:
        return math.nan
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        try:
            return float(text)
        except ValueError:
            return math.nan
    if isinstance(value, list):
        if not value:
            return 0.0
        if len(value) == 1:
            return to_number(stringify(value[0]))
    return math.nan


def _to_primitive(value: Any) -> Any:
    if isinstance(value, (dict, list)):
        return stringify(value)
    return value


def loose_equals(left: Any, right: Any) -> bool:
    """
    Coercing equality.

    None only equals None. Booleans compare as numbers. A number and a string
    compare numerically; containers compare through their text form.
    """
    if left is None or right is None:
        return left is None and right is None

    if isinstance(left, (dict, list)) and isinstance(right, (dict, list)):
        return left is right

    left = _to_primitive(left)
    right = _to_primitive(right)

    if isinstance(left, bool) or isinstance(right, bool):
        return to_number(left) == to_number(right)

    if isinstance(left, str) and isinstance(right, str):
        return left == right

    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        return left == right

    # number vs string
    left_num, right_num = to_number(left), to_number(right)
    if math.isnan(left_num) or math.isnan(right_num):
        return False
    return left_num == right_num


def contains(actual: Any, operand: Any) -> bool:
    return stringify(operand) in stringify(actual)


def greater(actual: Any, operand: Any) -> bool:
    # NaN comparisons are always False
    return to_number(actual) > to_number(operand)


def less(actual: Any, operand: Any) -> bool:
    return to_number(actual) < to_number(operand)


def exists(actual: Any, operand: Any = None) -> bool:
    return actual is not None


OPERATORS: Dict[str, Callable[[Any, Any], bool]] = {
    "equals": loose_equals,
    "contains": contains,
    "greater": greater,
    "less": less,
    "exists": exists,
}


def evaluate(operator: str, actual: Any, operand: Any) -> bool:
    """
    Apply a named operator.

    Unknown operators evaluate to False rather than raising.
    """
    func = OPERATORS.get(operator)
    if func is None:
        return False
    return bool(func(actual, operand))
