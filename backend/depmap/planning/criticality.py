# backend/depmap/planning/criticality.py
"""
Criticality Scorer - heuristic migration risk for a server name.

Lower score = safer to migrate early. First matching rule wins; names that
match nothing are scored by how many servers depend on them.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Set, Tuple

import yaml

from depmap.config import CRITICALITY_RULES_PATH
from depmap.graph.builder import dependents_count


@dataclass(frozen=True)
class CriticalityRule:
    keywords: Tuple[str, ...]
    score: int
    role: str

    def matches(self, name: str) -> bool:
        lowered = name.lower()
        return any(k in lowered for k in self.keywords)


DEFAULT_RULES: List[CriticalityRule] = [
    # non-production: always migrate first
    CriticalityRule(("test", "dev", "staging", "qa", "sandbox", "demo"), 10, "non_production"),
    # core data / identity / storage / cache / queue
    CriticalityRule(("database", "db", "sql"), 90, "database"),
    CriticalityRule(("auth", "ldap", "ad"), 85, "auth"),
    CriticalityRule(("storage", "s3", "blob"), 80, "storage"),
    CriticalityRule(("cache", "redis", "memcache"), 75, "cache"),
    CriticalityRule(("queue", "kafka", "rabbit"), 70, "queue"),
    # api / application tier
    CriticalityRule(("api", "rest", "graphql"), 50, "api"),
    CriticalityRule(("app",), 45, "app"),
    # auxiliary / edge
    CriticalityRule(("analytics", "bi", "report"), 30, "analytics"),
    CriticalityRule(("web", "nginx", "apache"), 25, "web"),
    CriticalityRule(("cdn", "cloudfront"), 20, "cdn"),
]

FALLBACK_BASE = 40
FALLBACK_STEP = 5


@dataclass
class CriticalityRules:
    rules: List[CriticalityRule] = field(default_factory=lambda: list(DEFAULT_RULES))
    fallback_base: int = FALLBACK_BASE
    fallback_step: int = FALLBACK_STEP

    def match(self, server_name: str) -> Optional[CriticalityRule]:
        for rule in self.rules:
            if rule.matches(server_name):
                return rule
        return None

    def score(self, server_name: str, deps: Mapping[str, Set[str]]) -> int:
        rule = self.match(server_name)
        if rule is not None:
            return rule.score
        return self.fallback_base + self.fallback_step * dependents_count(server_name, deps)

    def classify(self, server_name: str) -> str:
        rule = self.match(server_name)
        return rule.role if rule is not None else "default"

    @classmethod
    def from_dict(cls, data: Mapping) -> "CriticalityRules":
        """
        {"rules": [{"keywords": [...], "score": 90, "role": "database"}, ...],
         "fallback_base": 40, "fallback_step": 5}
        """
        raw_rules = data.get("rules")
        if not isinstance(raw_rules, list) or not raw_rules:
            raise ValueError("criticality rules file must define a non-empty 'rules' list")

        rules = []
        for i, raw in enumerate(raw_rules):
            keywords = raw.get("keywords") if isinstance(raw, Mapping) else None
            if not keywords or "score" not in raw:
                raise ValueError(f"criticality rule #{i + 1} needs 'keywords' and 'score'")
            rules.append(
                CriticalityRule(
                    keywords=tuple(str(k).lower() for k in keywords),
                    score=int(raw["score"]),
                    role=str(raw.get("role", "custom")),
                )
            )

        return cls(
            rules=rules,
            fallback_base=int(data.get("fallback_base", FALLBACK_BASE)),
            fallback_step=int(data.get("fallback_step", FALLBACK_STEP)),
        )

    @classmethod
    def from_yaml(cls, path: str) -> "CriticalityRules":
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        print(f"[Criticality] Loaded rules from {path}")
        return cls.from_dict(data)


# Global rules instance
_rules: Optional[CriticalityRules] = None


def get_criticality_rules() -> CriticalityRules:
    """Built-in table, or the YAML file named by CRITICALITY_RULES_PATH."""
    global _rules
    if _rules is None:
        if CRITICALITY_RULES_PATH:
            _rules = CriticalityRules.from_yaml(CRITICALITY_RULES_PATH)
        else:
            _rules = CriticalityRules()
    return _rules


def score(
    server_name: str,
    dependency_map: Mapping[str, Set[str]],
    rules: Optional[CriticalityRules] = None,
) -> int:
    return (rules or get_criticality_rules()).score(server_name, dependency_map)


def classify(server_name: str, rules: Optional[CriticalityRules] = None) -> str:
    return (rules or get_criticality_rules()).classify(server_name)


def score_all(
    dependency_map: Mapping[str, Set[str]],
    rules: Optional[CriticalityRules] = None,
) -> Dict[str, int]:
    rules = rules or get_criticality_rules()
    return {server: rules.score(server, dependency_map) for server in dependency_map}
