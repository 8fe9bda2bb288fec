"""Configuration shared by the structural detectors."""

from dataclasses import dataclass, fields
from typing import Any

from ..models import AutoFix, Certainty, Severity, Violation
from ..rules import PatternRule


@dataclass
class RuleConfig:
    """Reporting metadata of the rule a detector produces findings for.

    Subclasses add the rule's thresholds under the same names the rule
    uses, so `from_rule` can copy them across.
    """
    rule_id: str = ""
    severity: Severity = Severity.MEDIUM
    auto_fix: AutoFix = AutoFix.FLAG
    description: str = ""

    @classmethod
    def from_rule(cls, rule: PatternRule, **overrides: Any) -> "RuleConfig":
        values = {
            f.name: getattr(rule, f.name)
            for f in fields(cls)
            if f.name != "rule_id" and hasattr(rule, f.name)
        }
        values["rule_id"] = rule.id
        values.update(overrides)
        return cls(**values)

    def violation(self, file: str, line: int, category: str, message: str, **kwargs: Any) -> Violation:
        kwargs.setdefault("severity", self.severity)
        kwargs.setdefault("certainty", Certainty.MEDIUM)
        return Violation(
            file=file,
            line=line,
            category=category,
            message=message,
            rule_id=self.rule_id,
            auto_fix=self.auto_fix,
            **kwargs,
        )
