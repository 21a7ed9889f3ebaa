"""Template rendering for wgconf."""

from .template import TemplateRenderer
from .validation import validate_vars, primitive_to_string
from .functions import default_functions

__all__ = [
    'TemplateRenderer',
    'validate_vars',
    'primitive_to_string',
    'default_functions',
]
