# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Template Interpolation

Resolves {{path.to.value}} placeholders against node input data.
Never raises: anything that cannot be resolved becomes an empty string.
"""

import json
import re
from typing import Any

PLACEHOLDER_PATTERN = re.compile(r"\{\{([^}]+)\}\}")


def resolve_path(data: Any, path: str) -> Any:
    """
    Get nested value using dot notation.

    Dict keys are matched by name, list items by numeric index. Returns None
    as soon as a step cannot be taken.
    """
    if not isinstance(data, (dict, list)):
        return None

    current = data
    for part in path.strip().split("."):
        if isinstance(current, dict):
            current = current.get(part)
        elif isinstance(current, list) and part.isdigit():
            index = int(part)
            current = current[index] if index < len(current) else None
        else:
            return None
        if current is None:
            return None
    return current


def stringify(value: Any) -> str:
    """Render a resolved value the way it appears inside text"""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), default=str)
    return str(value)


def interpolate(template: str, data: Any) -> str:
    """
    Replace every {{ path }} placeholder in template.

    Examples:
        >>> interpolate("hi {{a.b}}", {"a": {"b": "world"}})
        'hi world'
        >>> interpolate("{{missing}}", {})
        ''
    """
    if not isinstance(template, str):
        return template

    def replace_ref(match: "re.Match") -> str:
        return stringify(resolve_path(data, match.group(1).strip()))

    return PLACEHOLDER_PATTERN.sub(replace_ref, template)


def is_object_shaped(value: Any) -> bool:
    """Interpolation only applies when input is a mapping or a list"""
    return isinstance(value, (dict, list))
