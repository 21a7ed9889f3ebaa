"""
Validation of template variable mappings.
Variables can only be primitives; composites are rejected before rendering.
"""

from typing import Any, Dict, Mapping, Optional

from ..config import DEFAULT_VARS_KEY
from ..errors import ValidationError


def _composite_kind(value: Any) -> Optional[str]:
    if isinstance(value, Mapping):
        return "map"
    if isinstance(value, (list, tuple, set, frozenset)):
        return "list"
    return None


def primitive_to_string(value: Any) -> str:
    """
    Serialize a primitive variable value to its template string form.

    Args:
        value: str, int, float or bool

    Returns:
        String form (booleans as "true"/"false", None as "")
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def validate_vars(
    variables: Optional[Mapping[str, Any]],
    key: str = DEFAULT_VARS_KEY,
) -> Dict[str, str]:
    """
    Validate a variable mapping and serialize its values to strings.

    Every offending key is collected into a single error.

    Args:
        variables: Raw variable mapping (None means empty)
        key: Attribute name reported in the error message

    Returns:
        Mapping of variable name to string value

    Raises:
        ValidationError: If any value is a list or map
    """
    if variables is None:
        return {}

    bad_vars = []
    for name in sorted(variables):
        kind = _composite_kind(variables[name])
        if kind is not None:
            bad_vars.append(f"{name} ({kind})")

    if bad_vars:
        raise ValidationError(
            f"{key}: cannot contain non-primitives; bad keys: {', '.join(bad_vars)}"
        )

    return {name: primitive_to_string(value) for name, value in variables.items()}
