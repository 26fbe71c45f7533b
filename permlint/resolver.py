"""
Syntactic name resolution for Java call sites and annotation names.

There is no compiler or classpath behind this module: it maps what is written
in one file onto (declaring type, method name) pairs using only the file's
package/import declarations and the declared types of fields, parameters and
locals. Anything it cannot pin down resolves to None, which callers treat as
"does not match".

Call shapes understood by resolve_call():

    m(...)             enclosing type if it declares m, else a single static import of m
    this.m(...)        enclosing type
    super.m(...)       declared superclass
    x.m(...)           declared type of local/parameter/field x, else x read as a type name
    a.b.C.m(...)       qualified type a.b.C
    this.f.m(...)      declared type of field f

Chained calls, casts, array accesses and parenthesized receivers are not
resolved.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, Optional

from tree_sitter import Node as TSNode

from permlint.context import FileContext, get_source_span

logger = logging.getLogger(__name__)

_DOTTED_NAME = re.compile(r"^[A-Za-z_$][\w$]*(?:\.[A-Za-z_$][\w$]*)*$")

_NAME_NODE_TYPES = frozenset({"identifier", "scoped_identifier"})


@dataclass(frozen=True)
class ResolvedMethod:
    """The symbol a call denotes: declaring type (possibly qualified) and method name."""

    declaring_type: str
    name: str

    @property
    def declaring_simple_name(self) -> str:
        return simple_name(self.declaring_type)


def simple_name(name: str) -> str:
    """Last segment of a dotted name ('a.b.C' -> 'C')."""
    return name.rsplit(".", 1)[-1]


def _normalize(text: str) -> str:
    return "".join(text.split())


def _is_type_like(name: str) -> bool:
    # Java convention: types are capitalized, variables and packages are not
    return bool(name) and name[0].isupper()


@dataclass(frozen=True)
class ImportTable:
    """Package and import declarations of one compilation unit."""

    package: Optional[str] = None
    single_types: dict[str, str] = field(default_factory=dict)
    static_members: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_tree(cls, context: FileContext, root: TSNode) -> "ImportTable":
        package: Optional[str] = None
        single_types: dict[str, str] = {}
        static_members: dict[str, str] = {}

        for node in root.named_children:
            if node.type == "package_declaration":
                name_node = _first_child_of_type(node, _NAME_NODE_TYPES)
                if name_node is not None:
                    package = _normalize(get_source_span(context, name_node))
            elif node.type == "import_declaration":
                name_node = _first_child_of_type(node, _NAME_NODE_TYPES)
                if name_node is None:
                    continue
                name = _normalize(get_source_span(context, name_node))
                if any(c.type == "asterisk" for c in node.children):
                    # on-demand imports never pin a name to one type
                    continue
                if any(c.type == "static" for c in node.children):
                    owner, _, member = name.rpartition(".")
                    if owner:
                        static_members[member] = owner
                else:
                    single_types[simple_name(name)] = name

        table = cls(
            package=package,
            single_types=single_types,
            static_members=static_members,
        )
        logger.debug(
            "Import table: package=%s, %d single-type, %d static member",
            package,
            len(single_types),
            len(static_members),
        )
        return table

    def qualify(self, written: str) -> str:
        """
        Best-effort qualified name for a type name as written in source.

        Already-qualified names are returned as written; simple names are
        expanded through single-type imports, and otherwise kept as written.
        """
        if "." in written:
            return written
        return self.single_types.get(written, written)


@dataclass(frozen=True)
class Scope:
    """Names visible from inside one method body."""

    type_name: str
    imports: ImportTable = field(default_factory=ImportTable)
    superclass: Optional[str] = None
    method_names: frozenset[str] = frozenset()
    field_types: dict[str, str] = field(default_factory=dict)
    local_types: dict[str, str] = field(default_factory=dict)

    def variable_type(self, name: str) -> Optional[str]:
        # Locals and parameters shadow fields
        if name in self.local_types:
            return self.local_types[name]
        return self.field_types.get(name)


def _first_child_of_type(node: TSNode, types: Iterable[str]) -> Optional[TSNode]:
    wanted = frozenset(types)
    for child in node.named_children:
        if child.type in wanted:
            return child
    return None


def declared_type_name(context: FileContext, type_node: Optional[TSNode]) -> Optional[str]:
    """
    Declared type as text without type arguments, or None for primitives,
    arrays and `var`.
    """
    if type_node is None:
        return None
    if type_node.type == "generic_type":
        inner = _first_child_of_type(type_node, ("type_identifier", "scoped_type_identifier"))
        return declared_type_name(context, inner)
    if type_node.type in ("type_identifier", "scoped_type_identifier"):
        name = _normalize(get_source_span(context, type_node))
        if name == "var":
            return None
        return name
    return None


def collect_variable_types(
    context: FileContext,
    declarations: Iterable[TSNode],
) -> dict[str, str]:
    """
    Map variable names to declared types for field_declaration,
    local_variable_declaration, constant_declaration and formal_parameter nodes.
    """
    types: dict[str, str] = {}
    for decl in declarations:
        declared = declared_type_name(context, decl.child_by_field_name("type"))
        if declared is None:
            continue
        if decl.type == "formal_parameter":
            name_node = decl.child_by_field_name("name")
            if name_node is not None:
                types[get_source_span(context, name_node)] = declared
            continue
        for declarator in decl.children_by_field_name("declarator"):
            name_node = declarator.child_by_field_name("name")
            if name_node is not None:
                types[get_source_span(context, name_node)] = declared
    return types


def _resolve_receiver_type(context: FileContext, receiver: TSNode, scope: Scope) -> Optional[str]:
    """Type named or denoted by the expression left of `.m(...)`."""
    if receiver.type == "this":
        return scope.type_name
    if receiver.type == "super":
        return scope.superclass

    text = _normalize(get_source_span(context, receiver))

    if receiver.type == "identifier":
        declared = scope.variable_type(text)
        if declared is not None:
            return declared
        if text in scope.imports.single_types:
            return scope.imports.single_types[text]
        # Not a variable in scope, so the identifier names a type, whatever its case
        return text

    if receiver.type == "field_access":
        target = receiver.child_by_field_name("object")
        member = receiver.child_by_field_name("field")
        if target is not None and target.type == "this" and member is not None:
            return scope.field_types.get(get_source_span(context, member))

    if receiver.type in ("field_access", "scoped_identifier"):
        if _DOTTED_NAME.match(text) and _is_type_like(simple_name(text)):
            return text

    return None


def resolve_call(
    context: FileContext,
    invocation: TSNode,
    scope: Scope,
) -> Optional[ResolvedMethod]:
    """
    Resolve a method_invocation node to the method it denotes, or None.

    Never raises: unknown shapes and unknown names resolve to None.
    """
    if invocation.type != "method_invocation":
        return None
    name_node = invocation.child_by_field_name("name")
    if name_node is None:
        return None
    name = get_source_span(context, name_node)

    receiver = invocation.child_by_field_name("object")
    if receiver is None:
        if name in scope.method_names:
            return ResolvedMethod(scope.type_name, name)
        owner = scope.imports.static_members.get(name)
        if owner is not None:
            return ResolvedMethod(owner, name)
        return None

    # Outer.super.m(...) names an enclosing instance's superclass; not tracked
    if receiver.type != "super" and any(c.type == "super" for c in invocation.children):
        return None

    declaring = _resolve_receiver_type(context, receiver, scope)
    if declaring is None:
        logger.debug("Unresolved call target: %s", get_source_span(context, invocation))
        return None
    return ResolvedMethod(declaring, name)
