"""Smart Default Classifier - Suggest root cause and issue category from catalog names"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple

from ..domain.enums import IssueCategory, RootCause
from ..domain.errors import NotFoundError
from ..domain.models import ClassificationSuggestion
from ..utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ClassificationRule:
    """Keywords that, when found in any input, yield a classification"""
    keywords: Tuple[str, ...]
    root_cause: RootCause
    issue_category: IssueCategory

    def matches(self, haystacks: Sequence[str]) -> bool:
        return any(keyword in text for keyword in self.keywords for text in haystacks)


class ClassificationStrategy(ABC):
    """Pluggable classification strategy"""

    @abstractmethod
    def classify(
        self,
        category: Optional[str],
        service: Optional[str],
        template: Optional[str]
    ) -> ClassificationSuggestion:
        """Return a suggestion; an empty suggestion means 'ask the user'"""


class KeywordRuleClassifier(ClassificationStrategy):
    """
    First-match-wins keyword rules

    Inputs are lower-cased and every rule keyword is tested as a substring of
    each input in turn. The first rule with any hit decides both values.
    """

    def __init__(self, rules: Sequence[ClassificationRule]):
        self.rules = tuple(rules)

    def classify(
        self,
        category: Optional[str],
        service: Optional[str],
        template: Optional[str]
    ) -> ClassificationSuggestion:
        haystacks = [(text or "").lower() for text in (category, service, template)]

        for rule in self.rules:
            if rule.matches(haystacks):
                return ClassificationSuggestion(
                    root_cause=rule.root_cause,
                    issue_category=rule.issue_category
                )

        logger.debug(f"No classification rule matched {haystacks}")
        return ClassificationSuggestion()


def _rule(keywords: Sequence[str], root_cause: RootCause, issue_category: IssueCategory) -> ClassificationRule:
    return ClassificationRule(tuple(keywords), root_cause, issue_category)


# ============================================================================
# Rule Tables
# ============================================================================

DEFAULT_RULES: Tuple[ClassificationRule, ...] = (
    _rule(
        ["hardware", "infrastructure", "network", "technical", "server", "printer", "computer"],
        RootCause.SYSTEM_ERROR, IssueCategory.PROBLEM
    ),
    _rule(
        ["user", "account", "access", "permission", "password", "login"],
        RootCause.HUMAN_ERROR, IssueCategory.REQUEST
    ),
    _rule(
        ["software", "application", "system", "app"],
        RootCause.SYSTEM_ERROR, IssueCategory.PROBLEM
    ),
    _rule(
        ["request", "service", "transaction", "transfer", "klaim"],
        RootCause.HUMAN_ERROR, IssueCategory.REQUEST
    ),
)

# Banking service catalog (core banking, channels, switching)
BANKING_RULES: Tuple[ClassificationRule, ...] = (
    _rule(["kasda", "treasury"], RootCause.EXTERNAL_FACTOR, IssueCategory.REQUEST),
    _rule(["atm"], RootCause.SYSTEM_ERROR, IssueCategory.PROBLEM),
    _rule(["qris", "payment"], RootCause.SYSTEM_ERROR, IssueCategory.PROBLEM),
    _rule(["olibs", "online banking"], RootCause.SYSTEM_ERROR, IssueCategory.PROBLEM),
    _rule(["card", "xcard"], RootCause.SYSTEM_ERROR, IssueCategory.COMPLAINT),
    _rule(["klaim", "claim"], RootCause.EXTERNAL_FACTOR, IssueCategory.REQUEST),
    _rule(["switching"], RootCause.SYSTEM_ERROR, IssueCategory.PROBLEM),
    _rule(
        ["hardware", "infrastructure", "network", "technical", "server", "maintenance"],
        RootCause.SYSTEM_ERROR, IssueCategory.PROBLEM
    ),
    _rule(["user", "account", "transfer", "bsgtouch"], RootCause.HUMAN_ERROR, IssueCategory.REQUEST),
    _rule(["software", "application", "instalasi"], RootCause.SYSTEM_ERROR, IssueCategory.PROBLEM),
    _rule(["general", "lainnya", "other"], RootCause.UNDETERMINED, IssueCategory.REQUEST),
)

RULE_SETS: Dict[str, Tuple[ClassificationRule, ...]] = {
    "default": DEFAULT_RULES,
    "banking": BANKING_RULES,
}


def get_classifier(rule_set: str = "default") -> KeywordRuleClassifier:
    """Build a classifier for a named rule table"""
    rules = RULE_SETS.get((rule_set or "default").lower())
    if rules is None:
        raise NotFoundError(
            f"Unknown classification rule set '{rule_set}'",
            details={"rule_set": rule_set, "available": sorted(RULE_SETS)}
        )
    return KeywordRuleClassifier(rules)


_default_classifier = KeywordRuleClassifier(DEFAULT_RULES)


def classify(
    category: Optional[str],
    service: Optional[str],
    template: Optional[str]
) -> ClassificationSuggestion:
    """Classify with the default rule table"""
    return _default_classifier.classify(category, service, template)
