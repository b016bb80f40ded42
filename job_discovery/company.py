"""Company-name heuristics for feed items that carry no explicit employer.

Rules are tried in order and the first match wins, so the table can be
reordered or replaced without touching the feed parser.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

UNKNOWN_COMPANY = "Unknown Company"


@dataclass(frozen=True)
class CompanyRule:
    name: str
    pattern: re.Pattern

    def extract(self, text: str) -> str | None:
        m = self.pattern.search(text)
        if not m:
            return None
        return m.group(1).strip() or None


# "iOS Developer at Apple"
_AT_COMPANY = CompanyRule(
    "at_company",
    re.compile(r"\b(?i:at)\s+([A-Z][a-zA-Z]+)\b"),
)

# "Stripe is hiring", "Acme seeking", "Globex looking for"
_COMPANY_HIRING = CompanyRule(
    "company_hiring",
    re.compile(r"\b([A-Z][a-zA-Z]+)\s+(?i:is\s+hiring|seeking|looking\s+for)\b"),
)

DEFAULT_RULES: tuple[CompanyRule, ...] = (_AT_COMPANY, _COMPANY_HIRING)


def extract_company(
    title: str,
    description: str = "",
    rules: tuple[CompanyRule, ...] = DEFAULT_RULES,
) -> str:
    text = f"{title or ''} {description or ''}"
    for rule in rules:
        company = rule.extract(text)
        if company:
            return company
    return UNKNOWN_COMPANY
