"""Unit tests for the smart default classifier."""
import pytest

from helpdesk.domain.enums import IssueCategory, RootCause
from helpdesk.domain.errors import NotFoundError
from helpdesk.engine.classifier import (
    ClassificationRule, KeywordRuleClassifier, classify, get_classifier
)


class TestDefaultRules:

    def test_hardware_example(self):
        result = classify("Hardware Support", "Printer Repair", "")
        assert result.root_cause == RootCause.SYSTEM_ERROR
        assert result.issue_category == IssueCategory.PROBLEM

    def test_account_example(self):
        result = classify("Account Access", "New User", "")
        assert result.root_cause == RootCause.HUMAN_ERROR
        assert result.issue_category == IssueCategory.REQUEST

    def test_first_rule_wins(self):
        # "network" (rule 1) and "password" (rule 2) both present
        result = classify("Password Reset", "Network", None)
        assert result.root_cause == RootCause.SYSTEM_ERROR

    def test_template_name_is_considered(self):
        result = classify("", "", "Fund Transfer Form")
        assert result.root_cause == RootCause.HUMAN_ERROR
        assert result.issue_category == IssueCategory.REQUEST

    def test_no_match_is_empty(self):
        result = classify("Kebersihan", "Gedung", "")
        assert result.is_empty
        assert result.root_cause is None and result.issue_category is None

    def test_none_inputs(self):
        assert classify(None, None, None).is_empty

    def test_deterministic(self):
        args = ("Core Banking", "Application Error", "Incident")
        assert classify(*args) == classify(*args)


class TestRuleSets:

    def test_banking_card_is_complaint(self):
        result = get_classifier("banking").classify("Kartu", "XCard Blocked", "")
        assert result.root_cause == RootCause.SYSTEM_ERROR
        assert result.issue_category == IssueCategory.COMPLAINT

    def test_banking_kasda_is_external(self):
        result = get_classifier("BANKING").classify("Kasda Online", "", "")
        assert result.root_cause == RootCause.EXTERNAL_FACTOR

    def test_banking_fallback_to_undetermined(self):
        result = get_classifier("banking").classify("Lainnya", "", "")
        assert result.root_cause == RootCause.UNDETERMINED
        assert result.issue_category == IssueCategory.REQUEST

    def test_unknown_rule_set(self):
        with pytest.raises(NotFoundError):
            get_classifier("retail")

    def test_custom_rules(self):
        classifier = KeywordRuleClassifier([
            ClassificationRule(("vendor",), RootCause.EXTERNAL_FACTOR, IssueCategory.COMPLAINT)
        ])
        assert classifier.classify("Vendor SLA", "", "").root_cause == RootCause.EXTERNAL_FACTOR
        assert classifier.classify("Hardware", "", "").is_empty
