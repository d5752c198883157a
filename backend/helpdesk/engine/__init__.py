"""Field Engine - Schema, values, validation, smart defaults and ticket workflow"""
from .schema_registry import FieldSchemaRegistry
from .field_store import FieldValueStore
from .field_validator import FieldValidator
from .classifier import (
    ClassificationRule, ClassificationStrategy, KeywordRuleClassifier,
    DEFAULT_RULES, BANKING_RULES, get_classifier, classify
)
from .fuzzy_matcher import MatchStrategy, TieredFuzzyMatcher, find_best_match
from .autofill import OrgUnitAutofill
from .ticket_workflow import TicketWorkflow, SlaPolicy, ApprovalPolicy, is_overdue
from .ticket_assembler import TicketAssembler

__all__ = [
    "FieldSchemaRegistry",
    "FieldValueStore",
    "FieldValidator",
    "ClassificationRule",
    "ClassificationStrategy",
    "KeywordRuleClassifier",
    "DEFAULT_RULES",
    "BANKING_RULES",
    "get_classifier",
    "classify",
    "MatchStrategy",
    "TieredFuzzyMatcher",
    "find_best_match",
    "OrgUnitAutofill",
    "TicketWorkflow",
    "SlaPolicy",
    "ApprovalPolicy",
    "is_overdue",
    "TicketAssembler",
]
