# Missing PermissionsDispatcher forwarding: classes annotated with @RuntimePermissions
# must call <ClassName>PermissionsDispatcher.onRequestPermissionsResult from their
# own onRequestPermissionsResult override.

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional

from permlint.context import FileContext
from permlint.declarations import (
    CallExpression,
    ClassDeclaration,
    MethodDeclaration,
    extract_class_declarations,
)
from permlint.findings.models import Finding, Issue, Location
from permlint.findings.sink import FindingSink
from permlint.rules.base import Rule

logger = logging.getLogger(__name__)

ISSUE = Issue(
    id="NeedOnRequestPermissionsResult",
    brief=(
        'Call the "onRequestPermissionsResult" method of the generated PermissionsDispatcher '
        "class in the respective method of your Activity or Fragment"
    ),
    explanation=(
        "You are required to inform the generated PermissionsDispatcher class about the "
        "results of a permission request. In your class annotated with @RuntimePermissions, "
        'override the "onRequestPermissionsResult" method and call through to the generated '
        "PermissionsDispatcher method with the same name."
    ),
    category="correctness",
    priority=5,
    severity="error",
)

MESSAGE = "Generated onRequestPermissionsResult method not called"


@dataclass(frozen=True)
class DispatcherContract:
    """Which classes are checked, which callback they must override, and where it must forward."""

    marker_annotations: frozenset[str] = frozenset(
        {"RuntimePermissions", "permissions.dispatcher.RuntimePermissions"}
    )
    callback_name: str = "onRequestPermissionsResult"
    companion_suffix: str = "PermissionsDispatcher"


DEFAULT_CONTRACT = DispatcherContract()


class AnnotationScanner:
    """Decides whether a class carries one of the marker annotations."""

    def __init__(self, marker_annotations: Iterable[str]) -> None:
        self._markers = frozenset(marker_annotations)

    def is_marked(self, cls: ClassDeclaration) -> bool:
        # An unknown qualified name (None) never matches
        return any(
            use.qualified_name is not None and use.qualified_name in self._markers
            for use in cls.annotations
        )


class CallbackVerifier:
    """
    Checks that a callback override forwards to the generated companion type.

    Only the top-level statements of the body are inspected: a forwarding call
    nested in an if/try/loop/lambda or used as a return value does not count.
    """

    def __init__(self, callback_name: str, companion_suffix: str) -> None:
        self.callback_name = callback_name
        self.companion_suffix = companion_suffix

    def companion_name(self, cls: ClassDeclaration) -> str:
        return cls.name + self.companion_suffix

    def callback_methods(self, cls: ClassDeclaration) -> list[MethodDeclaration]:
        return [m for m in cls.methods if m.name == self.callback_name]

    def verify(self, cls: ClassDeclaration, method: MethodDeclaration) -> bool:
        if method.body is None:
            return False
        companion = self.companion_name(cls)
        for statement in method.body:
            if not isinstance(statement, CallExpression):
                continue
            target = statement.resolved
            if target is None:
                continue
            if target.declaring_simple_name == companion and target.name == self.callback_name:
                return True
        return False


def check_class(
    cls: ClassDeclaration,
    contract: DispatcherContract,
    report: Callable[[MethodDeclaration], None],
) -> int:
    """
    Run the check over one class and call report(method) once per violating
    callback method. Returns the number of violations.
    """
    scanner = AnnotationScanner(contract.marker_annotations)
    if not scanner.is_marked(cls):
        return 0

    verifier = CallbackVerifier(contract.callback_name, contract.companion_suffix)
    violations = 0
    for method in verifier.callback_methods(cls):
        if verifier.verify(cls, method):
            logger.debug("%s.%s forwards to %s", cls.name, method.name, verifier.companion_name(cls))
            continue
        violations += 1
        report(method)
    return violations


def _location(context: FileContext, method: MethodDeclaration) -> Location:
    span = method.span
    return Location(
        path=context.path,
        line=span.line,
        column=span.column,
        end_line=span.end_line,
        end_column=span.end_column,
        snippet=span.snippet,
    )


class OnRequestPermissionsResultRule(Rule):
    """Flags @RuntimePermissions classes whose onRequestPermissionsResult does not forward."""

    issue = ISSUE

    def __init__(self, contract: Optional[DispatcherContract] = None) -> None:
        self.contract = contract or DEFAULT_CONTRACT

    def check(self, context: FileContext, sink: FindingSink) -> int:
        """Report every violation in the file into sink; returns the violation count."""
        total = 0
        for cls in extract_class_declarations(context):
            total += check_class(
                cls,
                self.contract,
                lambda method: sink.report(self.issue, _location(context, method), MESSAGE),
            )
        return total

    def run(self, context: FileContext, config: Any) -> list[Finding]:
        sink = FindingSink()
        self.check(context, sink)
        return sink.findings
