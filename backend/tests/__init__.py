"""
Test Suite

Tests for the helpdesk field engine.

    tests/
    ├── conftest.py                # Fakes of the collaborator interfaces, fixtures
    ├── test_field_*.py            # Schema, values, validation
    ├── test_classifier.py         # Smart default classification
    ├── test_fuzzy_matcher.py      # Master-data matching and autofill
    ├── test_ticket_workflow.py    # State machine, approvals, SLA
    ├── test_form_session.py       # Scoped form state, stale loads, submission
    ├── test_helpdesk_api.py       # httpx client against a mock transport
    └── test_api_routes.py         # FastAPI endpoints

To run tests:
    pytest backend/tests/
"""
