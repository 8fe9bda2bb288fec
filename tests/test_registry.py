import re

import pytest

from deslop.models import AutoFix, Severity
from deslop.patterns import DEFAULT_RULES
from deslop.registry import PatternRegistry, default_registry
from deslop.rules import AgeCheckedRule, ConsecutiveLineRule, EntropyCheckedRule, MultiPassRule, SimpleRule


@pytest.fixture
def registry():
    return default_registry()


def test_every_rule_lands_in_exactly_one_bucket_per_facet(registry):
    for rule in registry:
        language_buckets = [
            language for language in registry.available_languages()
            if rule.id in registry.get_for_language_only(language)
        ]
        severity_buckets = [s for s in Severity if rule.id in registry.get_by_severity(s)]
        fix_buckets = [a for a in AutoFix if rule.id in registry.get_by_auto_fix(a)]

        assert language_buckets == [rule.language or "universal"]
        assert severity_buckets == [rule.severity]
        assert fix_buckets == [rule.auto_fix]


def test_bucket_sizes_add_up_to_rule_count(registry):
    total = len(registry)
    assert sum(len(registry.get_for_language_only(lang)) for lang in registry.available_languages()) == total
    assert sum(len(registry.get_by_severity(s)) for s in Severity) == total
    assert sum(len(registry.get_by_auto_fix(a)) for a in AutoFix) == total


def test_no_criteria_returns_every_rule(registry):
    assert set(registry.get_by_criteria()) == set(registry.rules)


def test_views_share_rule_instances(registry):
    rule = registry["console_debugging"]
    assert registry.get_for_language("javascript")["console_debugging"] is rule
    assert registry.get_by_severity(Severity.MEDIUM)["console_debugging"] is rule
    assert registry.get_by_auto_fix("remove")["console_debugging"] is rule


def test_language_view_merges_universal_rules(registry):
    javascript = registry.get_for_language("javascript")
    assert "console_debugging" in javascript
    assert "hardcoded_secrets" in javascript
    assert "python_debugging" not in javascript

    only = registry.get_for_language_only("javascript")
    assert "console_debugging" in only
    assert "hardcoded_secrets" not in only


def test_unknown_keys_return_empty_results(registry):
    assert dict(registry.get_for_language_only("cobol")) == {}
    assert dict(registry.get_by_severity("catastrophic")) == {}
    assert dict(registry.get_by_auto_fix("rewrite")) == {}
    assert registry.get_by_criteria(severity="catastrophic") == {}


def test_available_facets(registry):
    assert sorted(registry.available_languages()) == ["go", "java", "javascript", "python", "rust", "universal"]
    assert sorted(registry.available_severities()) == ["critical", "high", "low", "medium"]
    assert registry.has_language("python")
    assert registry.has_language("universal")
    assert not registry.has_language("cobol")


def test_criteria_intersect(registry):
    selected = registry.get_by_criteria(language="python", severity="high")
    assert selected
    for rule in selected.values():
        assert rule.severity == Severity.HIGH
        assert rule.language in ("python", None)
    assert "placeholder_not_implemented_py" in selected
    assert "console_debugging" not in selected


def test_universal_criterion_excludes_language_rules(registry):
    selected = registry.get_by_criteria(language="universal")
    assert selected
    assert all(rule.is_universal for rule in selected.values())
    assert "python_debugging" not in selected


def test_criteria_accept_enums(registry):
    assert registry.get_by_criteria(severity=Severity.CRITICAL) == registry.get_by_criteria(severity="critical")


def test_views_are_read_only(registry):
    with pytest.raises(TypeError):
        registry.rules["new_rule"] = registry["console_debugging"]
    with pytest.raises(TypeError):
        registry.get_by_severity("low")["new_rule"] = registry["console_debugging"]


def test_duplicate_ids_are_rejected():
    rule = SimpleRule(id="dup", severity=Severity.LOW, auto_fix=AutoFix.FLAG, description="x", pattern=re.compile("x"))
    with pytest.raises(ValueError):
        PatternRegistry([rule, rule])


def test_rules_without_pattern_are_multi_pass():
    for rule in DEFAULT_RULES:
        if rule.pattern is None:
            assert isinstance(rule, MultiPassRule), rule.id


def test_rule_variants_carry_their_thresholds(registry):
    assert isinstance(registry["old_todos"], AgeCheckedRule)
    assert registry["old_todos"].age_threshold_days == 90
    assert isinstance(registry["high_entropy_string"], EntropyCheckedRule)
    assert registry["high_entropy_string"].entropy_threshold == 4.5
    assert isinstance(registry["commented_code"], ConsecutiveLineRule)
    assert registry["commented_code"].min_consecutive_lines == 5
    assert registry["doc_code_ratio_js"].max_ratio == 3.0
    assert registry["over_engineering_metrics"].file_ratio_threshold == 20
    assert registry["shotgun_surgery"].cluster_threshold == 5


def test_rules_for_file_skips_multi_pass(registry):
    rules = registry.rules_for_file("javascript")
    ids = {rule.id for rule in rules}
    assert "console_debugging" in ids
    assert "magic_numbers" in ids
    assert "doc_code_ratio_js" not in ids
    assert "duplicate_strings" not in ids


def test_rules_for_unknown_language_are_universal(registry):
    assert all(rule.is_universal for rule in registry.rules_for_file(None))


def test_default_registry_is_built_once():
    assert default_registry() is default_registry()
