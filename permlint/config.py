from __future__ import annotations

"""
Scanner configuration: which rules are enabled and the dispatcher contract
they enforce.

The contract (marker annotations, callback name, companion suffix) is an
immutable value handed to each rule at construction; the CLI builds one from
its options via build_contract().
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from permlint.rules.base import Rule
from permlint.rules.on_request_permissions_result import (
    DEFAULT_CONTRACT,
    DispatcherContract,
    OnRequestPermissionsResultRule,
)


@dataclass
class Config:
    """Scanner configuration: enabled rules and the contract they were built with."""

    rules: Sequence[Rule] = field(default_factory=list)
    contract: DispatcherContract = DEFAULT_CONTRACT


def build_contract(
    markers: Optional[Iterable[str]] = None,
    callback: Optional[str] = None,
    suffix: Optional[str] = None,
) -> DispatcherContract:
    """
    Return a DispatcherContract, falling back to the default for any part
    not given. An empty markers iterable counts as "not given".
    """
    marker_set = frozenset(m.strip() for m in markers or () if m.strip())
    return DispatcherContract(
        marker_annotations=marker_set or DEFAULT_CONTRACT.marker_annotations,
        callback_name=callback or DEFAULT_CONTRACT.callback_name,
        companion_suffix=suffix or DEFAULT_CONTRACT.companion_suffix,
    )


def get_default_config(contract: DispatcherContract | None = None) -> Config:
    """Return the configuration with all implemented rules, built for contract."""
    if contract is None:
        contract = DEFAULT_CONTRACT
    rules: List[Rule] = [
        OnRequestPermissionsResultRule(contract),
    ]
    return Config(rules=rules, contract=contract)


def get_enabled_rules(config: Config | None = None) -> Sequence[Rule]:
    """Return the list of enabled rules from the given config (or default config)."""
    if config is None:
        config = get_default_config()
    return config.rules
