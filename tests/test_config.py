"""Tests for scanner configuration and contract building."""

from permlint.config import Config, build_contract, get_default_config, get_enabled_rules
from permlint.rules.on_request_permissions_result import (
    DEFAULT_CONTRACT,
    OnRequestPermissionsResultRule,
)


def test_default_contract_values():
    assert DEFAULT_CONTRACT.marker_annotations == frozenset(
        {"RuntimePermissions", "permissions.dispatcher.RuntimePermissions"}
    )
    assert DEFAULT_CONTRACT.callback_name == "onRequestPermissionsResult"
    assert DEFAULT_CONTRACT.companion_suffix == "PermissionsDispatcher"


def test_build_contract_defaults():
    assert build_contract() == DEFAULT_CONTRACT
    assert build_contract(markers=[], callback="", suffix=None) == DEFAULT_CONTRACT


def test_build_contract_overrides():
    contract = build_contract(markers=[" Marked ", "com.x.Marked"], callback="onResult", suffix="Gen")
    assert contract.marker_annotations == frozenset({"Marked", "com.x.Marked"})
    assert contract.callback_name == "onResult"
    assert contract.companion_suffix == "Gen"


def test_default_config_registers_rule_with_contract():
    contract = build_contract(markers=["Marked"])
    config = get_default_config(contract)
    (rule,) = config.rules
    assert isinstance(rule, OnRequestPermissionsResultRule)
    assert rule.contract is contract
    assert config.contract is contract


def test_get_enabled_rules_without_config():
    rules = get_enabled_rules()
    assert [r.id for r in rules] == ["NeedOnRequestPermissionsResult"]


def test_empty_config_has_no_rules():
    assert list(get_enabled_rules(Config())) == []
