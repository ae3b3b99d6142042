"""Collect the data references a Jinja2 template makes.

The walker follows Jinja2's scoping: names bound by ``for``, ``with``,
``set``, macro and call-block arguments and imports are local and are not
data references. Loop targets and ``set``/``with`` aliases of data paths are
resolved back to the data they point at, so in::

    {% for item in order.lines %}{{ item.sku }}{% endfor %}

``item.sku`` is recorded as ``order.lines[].sku``.
"""

from dataclasses import dataclass
from enum import StrEnum

from jinja2 import nodes

# Path segment marking "an element of this sequence"
ITEM = "[]"

# Names provided by Jinja2 itself rather than by template data
SPECIAL_NAMES = frozenset(
    {
        "loop",
        "self",
        "super",
        "caller",
        "varargs",
        "kwargs",
        "range",
        "dict",
        "lipsum",
        "cycler",
        "joiner",
        "namespace",
    }
)
SELF_REFERENCE = "this"

_MAPPING_METHODS = frozenset({"items", "keys", "values", "get"})


class ReferenceRole(StrEnum):
    """How a template uses a data path."""

    VALUE = "value"
    ITERATED = "iterated"
    MAPPING = "mapping"
    ARGUMENT = "argument"


@dataclass(frozen=True, slots=True)
class VariableReference:
    """One use of template data.

    Attributes:
        name: Top-level variable name.
        path: Attribute/key segments below ``name``; ``ITEM`` marks a
            sequence element.
        role: How the value at the end of the path is used.
    """

    name: str
    path: tuple[str, ...]
    role: ReferenceRole


def is_excluded_name(name: str) -> bool:
    """True for names that never denote template data."""
    return not name or name == SELF_REFERENCE or name in SPECIAL_NAMES or name.startswith("@")


_Alias = tuple[str, tuple[str, ...]]


class ReferenceWalker:
    """Walk a parsed template and record every data reference in order."""

    def __init__(self) -> None:
        self.references: list[VariableReference] = []
        self.helpers: list[str] = []
        self._scopes: list[dict[str, _Alias | None]] = [{}]

    def walk(self, tree: nodes.Template) -> list[VariableReference]:
        self.visit(tree, ReferenceRole.VALUE)
        return self.references

    # -------------------------------------------------------------------------
    # Scopes
    # -------------------------------------------------------------------------

    def _lookup(self, name: str) -> tuple[bool, _Alias | None]:
        for scope in reversed(self._scopes):
            if name in scope:
                return True, scope[name]
        return False, None

    def _bind(self, target: nodes.Node, alias: _Alias | None = None) -> None:
        scope = self._scopes[-1]
        if isinstance(target, nodes.Name):
            scope[target.name] = alias
            return
        for name_node in target.find_all(nodes.Name):
            scope[name_node.name] = None

    def _push(self, names: dict[str, _Alias | None] | None = None) -> None:
        self._scopes.append(dict(names or {}))

    def _pop(self) -> None:
        _ = self._scopes.pop()

    # -------------------------------------------------------------------------
    # Paths
    # -------------------------------------------------------------------------

    def _chain(self, node: nodes.Node) -> tuple[nodes.Node, list[str]]:
        """Split ``a.b[0].c`` into its base node and path, walking index expressions.

        The base is a ``Name`` for data paths; anything else (a literal, a
        filter, a parenthesised expression) is returned as is.
        """
        path: list[str] = []
        current = node
        while True:
            if isinstance(current, nodes.Getattr):
                path.append(current.attr)
                current = current.node
            elif isinstance(current, nodes.Getitem):
                arg = current.arg
                if isinstance(arg, nodes.Const) and isinstance(arg.value, str):
                    path.append(arg.value)
                elif isinstance(arg, nodes.Slice):
                    self.visit(arg, ReferenceRole.ARGUMENT)
                else:
                    path.append(ITEM)
                    if not isinstance(arg, nodes.Const):
                        self.visit(arg, ReferenceRole.ARGUMENT)
                current = current.node
            else:
                path.reverse()
                return current, path

    def _resolve(self, node: nodes.Node) -> _Alias | None:
        """Return the data path ``node`` denotes, or None if it is local or not a path."""
        name_node, path = self._chain(node)
        if not isinstance(name_node, nodes.Name):
            self.visit(name_node, ReferenceRole.ARGUMENT)
            return None
        name = name_node.name
        if name_node.ctx != "load" or is_excluded_name(name):
            return None
        bound, alias = self._lookup(name)
        if bound:
            if alias is None:
                return None
            return alias[0], alias[1] + tuple(path)
        return name, tuple(path)

    def _reference(self, node: nodes.Node, role: ReferenceRole) -> _Alias | None:
        resolved = self._resolve(node)
        if resolved is not None:
            self.references.append(VariableReference(resolved[0], resolved[1], role))
        return resolved

    # -------------------------------------------------------------------------
    # Visitors
    # -------------------------------------------------------------------------

    def visit(self, node: nodes.Node, role: ReferenceRole) -> None:  # noqa: C901, PLR0912
        if isinstance(node, nodes.Name | nodes.Getattr | nodes.Getitem):
            _ = self._reference(node, role)
        elif isinstance(node, nodes.Call):
            self._visit_call(node)
        elif isinstance(node, nodes.Filter | nodes.Test):
            if isinstance(node, nodes.Filter):
                self.helpers.append(node.name)
            if node.node is not None:
                self.visit(node.node, ReferenceRole.ARGUMENT)
            self._visit_arguments(node)
        elif isinstance(node, nodes.For):
            self._visit_for(node)
        elif isinstance(node, nodes.With):
            self._visit_with(node)
        elif isinstance(node, nodes.Assign):
            alias = self._visit_aliased(node.node)
            if isinstance(node.target, nodes.Name):
                self._bind(node.target, alias)
            elif not isinstance(node.target, nodes.NSRef):
                self._bind(node.target)
        elif isinstance(node, nodes.AssignBlock):
            if node.filter is not None:
                self.visit(node.filter, ReferenceRole.VALUE)
            self._visit_body(node.body)
            self._bind(node.target)
        elif isinstance(node, nodes.Macro):
            self._scopes[-1][node.name] = None
            self._visit_callable_body(node.args, node.defaults, node.body)
        elif isinstance(node, nodes.CallBlock):
            self.visit(node.call, ReferenceRole.VALUE)
            self._visit_callable_body(node.args, node.defaults, node.body)
        elif isinstance(node, nodes.Import):
            self._scopes[-1][node.target] = None
        elif isinstance(node, nodes.FromImport):
            for imported in node.names:
                local = imported[1] if isinstance(imported, tuple) else imported
                self._scopes[-1][local] = None
        elif isinstance(node, nodes.If):
            self.visit(node.test, ReferenceRole.ARGUMENT)
            self._visit_body(node.body)
            for branch in node.elif_:
                self.visit(branch, role)
            self._visit_body(node.else_)
        else:
            # Container literals hold arguments; operators pass their role on
            child_role = (
                ReferenceRole.ARGUMENT
                if isinstance(node, nodes.Tuple | nodes.List | nodes.Dict)
                else role
            )
            for child in node.iter_child_nodes():
                self.visit(child, child_role)

    def _visit_body(self, body: list[nodes.Node]) -> None:
        for child in body:
            self.visit(child, ReferenceRole.VALUE)

    def _visit_arguments(self, node: nodes.Call | nodes.Filter | nodes.Test) -> None:
        for arg in node.args:
            self.visit(arg, ReferenceRole.ARGUMENT)
        for keyword in node.kwargs:
            self.visit(keyword.value, ReferenceRole.ARGUMENT)
        if node.dyn_args is not None:
            self.visit(node.dyn_args, ReferenceRole.ARGUMENT)
        if node.dyn_kwargs is not None:
            self.visit(node.dyn_kwargs, ReferenceRole.ARGUMENT)

    def _visit_call(self, node: nodes.Call) -> None:
        callee = node.node
        if isinstance(callee, nodes.Name):
            if not self._lookup(callee.name)[0]:
                self.helpers.append(callee.name)
        elif isinstance(callee, nodes.Getattr) and callee.attr in _MAPPING_METHODS:
            _ = self._reference(callee.node, ReferenceRole.MAPPING)
        else:
            self.visit(callee, ReferenceRole.ARGUMENT)
        self._visit_arguments(node)

    def _visit_aliased(self, value: nodes.Node) -> _Alias | None:
        """Walk an assigned value; return the data path it aliases, if any."""
        if isinstance(value, nodes.Name | nodes.Getattr | nodes.Getitem):
            return self._reference(value, ReferenceRole.ARGUMENT)
        self.visit(value, ReferenceRole.ARGUMENT)
        return None

    def _visit_for(self, node: nodes.For) -> None:
        source: _Alias | None = None
        if isinstance(node.iter, nodes.Name | nodes.Getattr | nodes.Getitem):
            source = self._reference(node.iter, ReferenceRole.ITERATED)
        else:
            self.visit(node.iter, ReferenceRole.ARGUMENT)

        item_alias = None if source is None else (source[0], (*source[1], ITEM))
        self._push({"loop": None})
        self._bind(node.target, item_alias)
        if node.test is not None:
            self.visit(node.test, ReferenceRole.ARGUMENT)
        self._visit_body(node.body)
        self._pop()
        self._visit_body(node.else_)

    def _visit_with(self, node: nodes.With) -> None:
        aliases = [self._visit_aliased(value) for value in node.values]
        self._push()
        for target, alias in zip(node.targets, aliases, strict=False):
            self._bind(target, alias)
        self._visit_body(node.body)
        self._pop()

    def _visit_callable_body(
        self,
        args: list[nodes.Name],
        defaults: list[nodes.Expr],
        body: list[nodes.Node],
    ) -> None:
        for default in defaults:
            self.visit(default, ReferenceRole.ARGUMENT)
        self._push({arg.name: None for arg in args})
        self._visit_body(body)
        self._pop()


def collect_references(tree: nodes.Template) -> tuple[list[VariableReference], list[str]]:
    """Return the data references and helper names used by ``tree``."""
    walker = ReferenceWalker()
    references = walker.walk(tree)
    return references, walker.helpers
