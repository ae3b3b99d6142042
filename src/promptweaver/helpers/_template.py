"""Partial-rendering helpers.

These receive the active Jinja2 context explicitly (``pass_context``) so they
can reach the engine that owns the partials and the data of the calling
template.
"""

from collections.abc import Mapping

from jinja2 import TemplateNotFound, pass_context
from jinja2.runtime import Context

from promptweaver.utils import is_missing


def _render_partial(context: Context, name: object, data: object) -> str:
    if not isinstance(name, str) or not name:
        return ""
    try:
        template = context.environment.get_template(name)
    except TemplateNotFound:
        return ""
    if isinstance(data, Mapping):
        return template.render(dict(data))  # pyright: ignore[reportUnknownArgumentType]
    if is_missing(data):
        return template.render(context.get_all())
    return template.render({"this": data})


@pass_context
def partial(context: Context, name: object, data: object = None) -> str:
    """Render the partial ``name`` with ``data``, or the caller's data.

    Unknown partials render as an empty string.

    Example:
        {{ partial("signature") }}
    """
    return _render_partial(context, name, data)


@pass_context
def include(context: Context, name: object, data: object = None) -> str:
    """Render the partial ``name`` against an explicit mapping.

    Example:
        {{ include("user_card", user) }}
    """
    return _render_partial(context, name, data)


TEMPLATE_HELPERS = {
    "partial": partial,
    "include": include,
}
