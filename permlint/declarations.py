# Read-only declaration views over a parsed Java file: classes, their annotations,
# their methods, and the top-level statements of each method body.
# Rules work on these views instead of raw tree-sitter nodes.

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional, Union

from tree_sitter import Node as TSNode

from permlint.context import (
    TYPE_DECLARATION_TYPES,
    FileContext,
    get_end_line_col,
    get_line_col,
    get_source_span,
)
from permlint.resolver import (
    ImportTable,
    ResolvedMethod,
    Scope,
    collect_variable_types,
    declared_type_name,
    resolve_call,
)

logger = logging.getLogger(__name__)

ANNOTATION_TYPES = frozenset({"marker_annotation", "annotation"})
COMMENT_TYPES = frozenset({"line_comment", "block_comment"})
VARIABLE_DECLARATION_TYPES = frozenset({"field_declaration", "constant_declaration"})


@dataclass(frozen=True)
class SourceSpan:
    """1-based start/end position of a declaration plus a one-line snippet."""

    line: int = 1
    column: int = 1
    end_line: Optional[int] = None
    end_column: Optional[int] = None
    snippet: Optional[str] = None


@dataclass(frozen=True)
class AnnotationUse:
    """An annotation as written on a declaration; qualified_name is None when unknown."""

    name: str
    qualified_name: Optional[str]


@dataclass(frozen=True)
class CallExpression:
    """A statement-level method call and the method it resolved to, if any."""

    text: str
    resolved: Optional[ResolvedMethod] = None


@dataclass(frozen=True)
class OtherStatement:
    """Any top-level statement that is not a bare method call (if, return, block, ...)."""

    kind: str
    text: str = ""


Statement = Union[CallExpression, OtherStatement]


@dataclass(frozen=True)
class MethodDeclaration:
    """A declared method. body is None for abstract and interface methods."""

    name: str
    body: Optional[tuple[Statement, ...]]
    span: SourceSpan = SourceSpan()


@dataclass(frozen=True)
class ClassDeclaration:
    """A named type declaration with its own annotations and methods (nested types excluded)."""

    name: str
    qualified_name: str
    annotations: tuple[AnnotationUse, ...] = ()
    methods: tuple[MethodDeclaration, ...] = ()
    span: SourceSpan = SourceSpan()


def _normalize(text: str) -> str:
    return " ".join(text.split())


def _span(context: FileContext, node: TSNode, header_end: Optional[int] = None) -> SourceSpan:
    """Span of node; the snippet is the source up to header_end (or the first line)."""
    line, col = get_line_col(node)
    end_line, end_col = get_end_line_col(node)
    if header_end is not None:
        snippet = context.source[node.start_byte : header_end].decode("utf-8", errors="replace")
    else:
        text = get_source_span(context, node)
        snippet = text.splitlines()[0] if text else ""
    return SourceSpan(
        line=line,
        column=col,
        end_line=end_line,
        end_column=end_col,
        snippet=_normalize(snippet),
    )


def _modifiers(node: TSNode) -> Optional[TSNode]:
    for child in node.named_children:
        if child.type == "modifiers":
            return child
    return None


def _annotations(context: FileContext, node: TSNode, imports: ImportTable) -> tuple[AnnotationUse, ...]:
    modifiers = _modifiers(node)
    if modifiers is None:
        return ()
    uses: list[AnnotationUse] = []
    for child in modifiers.named_children:
        if child.type not in ANNOTATION_TYPES:
            continue
        name_node = child.child_by_field_name("name")
        if name_node is None:
            uses.append(AnnotationUse(name="", qualified_name=None))
            continue
        written = "".join(get_source_span(context, name_node).split())
        uses.append(AnnotationUse(name=written, qualified_name=imports.qualify(written)))
    return tuple(uses)


def _members(body: Optional[TSNode]) -> list[TSNode]:
    """Direct members of a class/interface/enum/record body."""
    if body is None:
        return []
    members: list[TSNode] = []
    for child in body.named_children:
        if child.type == "enum_body_declarations":
            members.extend(child.named_children)
        else:
            members.append(child)
    return members


def _statement(context: FileContext, node: TSNode, scope: Scope) -> Statement:
    text = _normalize(get_source_span(context, node))
    if node.type == "expression_statement":
        expressions = [c for c in node.named_children if c.type not in COMMENT_TYPES]
        if expressions and expressions[0].type == "method_invocation":
            return CallExpression(text=text, resolved=resolve_call(context, expressions[0], scope))
    return OtherStatement(kind=node.type, text=text)


def _method(context: FileContext, node: TSNode, class_scope: Scope) -> Optional[MethodDeclaration]:
    name_node = node.child_by_field_name("name")
    if name_node is None:
        return None
    name = get_source_span(context, name_node)
    body_node = node.child_by_field_name("body")

    if body_node is None:
        return MethodDeclaration(name=name, body=None, span=_span(context, node))

    parameters = node.child_by_field_name("parameters")
    local_types = collect_variable_types(
        context,
        [p for p in parameters.named_children if p.type == "formal_parameter"] if parameters is not None else [],
    )

    # Locals are in scope from the statement after their declaration; locals of
    # nested blocks, lambdas and anonymous classes never reach top-level statements
    statements: list[Statement] = []
    for child in body_node.named_children:
        if child.type in COMMENT_TYPES:
            continue
        scope = replace(class_scope, local_types=dict(local_types))
        statements.append(_statement(context, child, scope))
        if child.type == "local_variable_declaration":
            local_types.update(collect_variable_types(context, [child]))
    return MethodDeclaration(
        name=name,
        body=tuple(statements),
        span=_span(context, node, header_end=body_node.start_byte),
    )


def _class(
    context: FileContext,
    node: TSNode,
    imports: ImportTable,
    outer: list[str],
) -> Optional[ClassDeclaration]:
    name_node = node.child_by_field_name("name")
    if name_node is None:
        return None
    name = get_source_span(context, name_node)
    qualified_name = ".".join([p for p in [imports.package, *outer, name] if p])

    superclass: Optional[str] = None
    superclass_node = node.child_by_field_name("superclass")
    if superclass_node is not None and superclass_node.named_children:
        written = declared_type_name(context, superclass_node.named_children[0])
        if written is not None:
            superclass = imports.qualify(written)

    members = _members(node.child_by_field_name("body"))
    method_nodes = [m for m in members if m.type == "method_declaration"]
    method_names = frozenset(
        get_source_span(context, n)
        for n in (m.child_by_field_name("name") for m in method_nodes)
        if n is not None
    )
    class_scope = Scope(
        type_name=name,
        imports=imports,
        superclass=superclass,
        method_names=method_names,
        field_types=collect_variable_types(
            context, [m for m in members if m.type in VARIABLE_DECLARATION_TYPES]
        ),
    )

    methods = tuple(
        method
        for method in (_method(context, m, class_scope) for m in method_nodes)
        if method is not None
    )
    body_node = node.child_by_field_name("body")
    return ClassDeclaration(
        name=name,
        qualified_name=qualified_name,
        annotations=_annotations(context, node, imports),
        methods=methods,
        span=_span(context, node, header_end=body_node.start_byte if body_node is not None else None),
    )


def extract_class_declarations(context: FileContext) -> list[ClassDeclaration]:
    """
    Build a ClassDeclaration for every named type declared in the file.

    Nested and local types get their own entry; a declaration's methods and
    annotations never include those of the types nested inside it.
    """
    root = context.root_node
    imports = ImportTable.from_tree(context, root)
    declarations: list[ClassDeclaration] = []

    def _visit(node: TSNode, outer: list[str]) -> None:
        for child in node.named_children:
            if child.type in TYPE_DECLARATION_TYPES:
                decl = _class(context, child, imports, outer)
                if decl is None:
                    _visit(child, outer)
                    continue
                declarations.append(decl)
                _visit(child, [*outer, decl.name])
            else:
                _visit(child, outer)

    _visit(root, [])
    logger.debug("Extracted %d type declaration(s) from %s", len(declarations), context.path)
    return declarations
