"""
Domain-specific exceptions for wgconf.
All exceptions are explicit and carry meaningful context.
"""

from typing import Optional

from .config import RENDER_PARSE, RENDER_EVALUATION, RENDER_COERCION


class WGConfError(Exception):
    """Base exception for all wgconf errors."""
    pass


class IdentityError(WGConfError):
    """Base exception for identifier and key errors."""
    pass


class EntropyError(IdentityError):
    """Raised when the entropy source fails or returns too few bytes."""
    pass


class DecodeError(IdentityError):
    """Raised when an identifier is not valid unpadded URL-safe base64."""
    pass


class KeypairError(IdentityError):
    """Raised when keypair derivation is given invalid material."""
    pass


class ValidationError(WGConfError):
    """Raised when resource inputs, such as a variable mapping, are invalid."""
    pass


class RenderError(WGConfError):
    """
    Base exception for template rendering failures.

    Carries the template field that failed and the failure kind
    (parse, evaluation or coercion).
    """

    kind = "render"

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        self.detail = message
        if field:
            message = f"failed to render {field}: {message}"
        super().__init__(message)


class TemplateParseError(RenderError):
    """Raised when a template cannot be parsed."""
    kind = RENDER_PARSE


class TemplateEvaluationError(RenderError):
    """Raised when a template references an undefined variable or a function fails."""
    kind = RENDER_EVALUATION


class TemplateCoercionError(RenderError):
    """Raised when an interpolated result cannot be converted to a string."""
    kind = RENDER_COERCION


class InvariantViolationError(WGConfError):
    """Raised when a core key or aggregation invariant is violated."""
    pass
