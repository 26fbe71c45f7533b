"""Tests for permlint.declarations: class/method/statement views over Java ASTs."""

from pathlib import Path

from permlint.context import FileContext
from permlint.declarations import (
    AnnotationUse,
    CallExpression,
    OtherStatement,
    extract_class_declarations,
)
from permlint.parser import parse_bytes


def _context(source: bytes) -> FileContext:
    return FileContext(path=Path("Test.java"), source=source, tree=parse_bytes(source))


def _by_name(source: bytes) -> dict:
    return {d.name: d for d in extract_class_declarations(_context(source))}


def test_class_name_package_and_imported_annotation():
    source = b"""
package com.example;

import permissions.dispatcher.RuntimePermissions;

@RuntimePermissions
public class MainActivity { }
"""
    (decl,) = extract_class_declarations(_context(source))
    assert decl.name == "MainActivity"
    assert decl.qualified_name == "com.example.MainActivity"
    assert decl.annotations == (
        AnnotationUse(name="RuntimePermissions", qualified_name="permissions.dispatcher.RuntimePermissions"),
    )


def test_annotation_without_import_keeps_written_name():
    source = b'@SuppressWarnings("unused") @RuntimePermissions class A { }'
    (decl,) = extract_class_declarations(_context(source))
    assert [a.qualified_name for a in decl.annotations] == ["SuppressWarnings", "RuntimePermissions"]


def test_qualified_annotation_kept_as_written():
    source = b"@permissions.dispatcher.RuntimePermissions class A { }"
    (decl,) = extract_class_declarations(_context(source))
    assert decl.annotations[0].qualified_name == "permissions.dispatcher.RuntimePermissions"


def test_nested_types_are_separate_declarations():
    source = b"""
package p;
class Outer {
    void outerMethod() { }
    static class Inner {
        void innerMethod() { }
    }
}
"""
    decls = _by_name(source)
    assert set(decls) == {"Outer", "Inner"}
    assert [m.name for m in decls["Outer"].methods] == ["outerMethod"]
    assert [m.name for m in decls["Inner"].methods] == ["innerMethod"]
    assert decls["Inner"].qualified_name == "p.Outer.Inner"


def test_abstract_and_interface_methods_have_no_body():
    source = b"""
abstract class Base { abstract void run(); void stop() { } }
interface Callback { void onResult(int code); }
"""
    decls = _by_name(source)
    base_methods = {m.name: m for m in decls["Base"].methods}
    assert base_methods["run"].body is None
    assert base_methods["stop"].body == ()
    assert decls["Callback"].methods[0].body is None


def test_enum_methods_are_collected():
    source = b"enum Mode { ON, OFF; void toggle() { } }"
    (decl,) = extract_class_declarations(_context(source))
    assert [m.name for m in decl.methods] == ["toggle"]


def test_top_level_statements_are_classified():
    source = b"""
class A {
    void go(boolean flag) {
        // leading comment
        run();
        if (flag) { run(); }
        int x = compute();
        new Thread().start();
    }
    void run() { }
    int compute() { return 1; }
}
"""
    decls = _by_name(source)
    go = decls["A"].methods[0]
    assert go.body is not None
    assert len(go.body) == 4
    assert isinstance(go.body[0], CallExpression)
    assert go.body[0].text == "run();"
    assert isinstance(go.body[1], OtherStatement)
    assert go.body[1].kind == "if_statement"
    assert isinstance(go.body[2], OtherStatement)
    assert go.body[2].kind == "local_variable_declaration"
    # chained call on a fresh object is still a call, just not resolvable
    assert isinstance(go.body[3], CallExpression)
    assert go.body[3].resolved is None


def test_return_of_call_is_not_a_call_statement():
    source = b"class A { int f() { return g(); } int g() { return 0; } }"
    decls = _by_name(source)
    (statement,) = decls["A"].methods[0].body
    assert isinstance(statement, OtherStatement)
    assert statement.kind == "return_statement"


def test_method_span_points_at_declaration():
    source = b"""class A {

    @Override
    public void onRequestPermissionsResult(int requestCode, String[] permissions, int[] grantResults) {
        foo();
    }
}
"""
    (decl,) = extract_class_declarations(_context(source))
    span = decl.methods[0].span
    assert span.line == 3
    assert span.column == 5
    assert span.end_line == 6
    assert span.snippet == (
        "@Override public void onRequestPermissionsResult("
        "int requestCode, String[] permissions, int[] grantResults)"
    )


def test_malformed_source_does_not_raise():
    source = b"@RuntimePermissions class A { void onRequestPermissionsResult( { }"
    decls = extract_class_declarations(_context(source))
    assert isinstance(decls, list)
