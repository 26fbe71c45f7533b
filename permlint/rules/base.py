# Rule interface (abstract base class): defines the contract all rules must implement.
# Concrete rules subclass Rule, describe themselves with an Issue, and implement run().

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from permlint.context import FileContext
from permlint.findings.models import Finding, Issue


class Rule(ABC):
    """
    Abstract base class for all static analysis rules.

    Subclasses must define:
    - issue: Issue, the static identity (id, brief, explanation, category, priority, severity)
    - run(context, config) -> list[Finding]: analyze one file and return findings

    The scanner calls run() once per file; context holds path, source bytes, and AST.
    Rules keep no state between run() calls, so one instance may serve several
    threads at once.
    """

    issue: Issue

    @property
    def id(self) -> str:
        return self.issue.id

    @property
    def name(self) -> str:
        return self.issue.brief

    @abstractmethod
    def run(self, context: FileContext, config: Any) -> list[Finding]:
        """
        Analyze one file and return any findings.

        Args:
            context: Per-file state (path, source bytes, AST tree).
            config: Scanner config (may be None when a rule is run directly).

        Returns:
            List of Finding objects for each issue found in this file.
            Return an empty list if no issues.
        """
        ...
