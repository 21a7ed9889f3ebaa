"""
Template rendering for interface and peer sections.

Templates use ``${expr}`` interpolation, ``%{ if ... }`` /
``%{ for ... }`` directives, ``$${``/``%%{`` escapes and ``~`` strip
markers. Evaluation is delegated to a sandboxed jinja2 environment;
every variable is bound as a string and the function library is
fixed when the renderer is constructed.
"""

from typing import Any, Callable, Dict, Mapping, Optional

from jinja2 import StrictUndefined, TemplateSyntaxError, UndefinedError
from jinja2.exceptions import TemplateError
from jinja2.sandbox import SandboxedEnvironment

from ..config import (
    VARIABLE_START,
    VARIABLE_END,
    BLOCK_START,
    BLOCK_END,
    COMMENT_START,
    COMMENT_END,
    TEMPLATE_NAME,
)
from ..errors import (
    TemplateParseError,
    TemplateEvaluationError,
    TemplateCoercionError,
)
from .escapes import TemplateEscapeExtension
from .functions import default_functions


class _UnconvertibleResult(Exception):
    """Interpolated value has no string form."""


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, Mapping):
        return "map"
    return "list"


def _finalize(value: Any) -> Any:
    # Applied by jinja2 to every interpolated value before output
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None or isinstance(value, (Mapping, list, tuple, set, frozenset)):
        raise _UnconvertibleResult(f"{_type_name(value)} value cannot be converted to string")
    return value


class TemplateRenderer:
    """
    Renders text templates against a mapping of string variables.
    """

    def __init__(self, functions: Optional[Mapping[str, Callable[..., Any]]] = None):
        """
        Initialize renderer.

        Args:
            functions: Function library exposed to templates
                (defaults to :func:`default_functions`)
        """
        if functions is None:
            functions = default_functions()

        self._functions = dict(functions)
        self._env = SandboxedEnvironment(
            variable_start_string=VARIABLE_START,
            variable_end_string=VARIABLE_END,
            block_start_string=BLOCK_START,
            block_end_string=BLOCK_END,
            comment_start_string=COMMENT_START,
            comment_end_string=COMMENT_END,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            autoescape=False,
            finalize=_finalize,
            extensions=[TemplateEscapeExtension],
        )
        self._env.globals.update(self._functions)

    @property
    def functions(self) -> Dict[str, Callable[..., Any]]:
        """Copy of the function library."""
        return dict(self._functions)

    def render(
        self,
        template: str,
        variables: Mapping[str, str],
        field: Optional[str] = None,
    ) -> str:
        """
        Render a template.

        Args:
            template: Template text
            variables: Variable name to string value
            field: Name of the template attribute, reported in errors

        Returns:
            Rendered text

        Raises:
            TemplateParseError: If the template has a syntax error
            TemplateEvaluationError: If a variable is undefined or not a
                string, or a function fails
            TemplateCoercionError: If an interpolated value has no string form
        """
        try:
            compiled = self._env.from_string(template)
        except TemplateSyntaxError as e:
            raise TemplateParseError(
                f"{TEMPLATE_NAME}:{e.lineno}: {e.message}", field=field
            )

        scope = {}
        for name, value in variables.items():
            # Only strings can be bound; callers validate and serialize first.
            if not isinstance(value, str):
                raise TemplateEvaluationError(
                    f"unexpected type for variable {name!r}: {type(value).__name__}",
                    field=field,
                )
            scope[name] = value

        try:
            return compiled.render(scope)
        except _UnconvertibleResult as e:
            raise TemplateCoercionError(f"invalid template result: {e}", field=field)
        except UndefinedError as e:
            raise TemplateEvaluationError(f"{TEMPLATE_NAME}: {e.message}", field=field)
        except TemplateError as e:
            raise TemplateEvaluationError(f"{TEMPLATE_NAME}: {e}", field=field)
        except Exception as e:
            raise TemplateEvaluationError(
                f"{TEMPLATE_NAME}: call failed: {type(e).__name__}: {e}", field=field
            )
