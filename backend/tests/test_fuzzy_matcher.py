"""Unit tests for fuzzy master-data matching and org-unit autofill."""
import pytest

from helpdesk.domain.models import MasterDataOption, OrgUnit, UserProfile
from helpdesk.engine.autofill import OrgUnitAutofill
from helpdesk.engine.fuzzy_matcher import find_best_match
from tests.conftest import make_field


def options(*labels):
    return [MasterDataOption(value=f"v-{i}", label=label) for i, label in enumerate(labels)]


class TestFindBestMatch:

    def test_substring_example(self):
        candidates = options("Utama", "Manado")
        assert find_best_match("Kantor Cabang Utama", candidates).label == "Utama"

    def test_exact_beats_substring(self):
        candidates = options("Kantor Cabang Utama Baru", "kantor cabang  utama")
        assert find_best_match("Kantor Cabang Utama", candidates).value == "v-1"

    def test_substring_beats_token_overlap(self):
        candidates = options("Cabang Manado", "Utama")
        assert find_best_match("Kantor Utama", candidates).label == "Utama"

    def test_token_overlap(self):
        candidates = options("Divisi Teknologi", "Divisi Kredit")
        assert find_best_match("Bagian Kredit Konsumer", candidates).label == "Divisi Kredit"

    def test_ties_resolved_by_candidate_order(self):
        candidates = options("Cabang Utama", "Utama Cabang")
        assert find_best_match("Utama", candidates).value == "v-0"

    def test_display_name_and_name_fallback(self):
        candidates = [MasterDataOption(value="1", display_name="Manado"), MasterDataOption(value="2", name="Bitung")]
        assert find_best_match("bitung", candidates).value == "2"

    def test_no_match(self):
        assert find_best_match("Jakarta", options("Manado", "Bitung")) is None

    def test_empty_inputs(self):
        assert find_best_match("", options("Manado")) is None
        assert find_best_match("Manado", []) is None

    def test_blank_candidates_skipped(self):
        candidates = [MasterDataOption(value="x", label=""), *options("Manado")]
        assert find_best_match("Cabang Manado", candidates).label == "Manado"


class TestOrgUnitAutofill:

    @pytest.fixture
    def autofill(self):
        return OrgUnitAutofill(keywords=["unit", "department", "cabang", "unit kerja"])

    def test_unit_field_detection(self, autofill):
        assert autofill.is_unit_field(make_field("unit_kerja", "Unit Kerja"))
        assert autofill.is_unit_field(make_field("origin", "Cabang Asal"))
        assert not autofill.is_unit_field(make_field("contact_phone", "Contact Phone"))

    def test_choice_field_uses_field_options(self, autofill, incident_schema, branch_user):
        assert autofill.compute(incident_schema, branch_user) == {"unit_kerja": "Cabang Utama"}

    def test_master_data_preferred(self, autofill, incident_schema, branch_user):
        master = {"unit_kerja": [MasterDataOption(value="KCU-01", label="KC Utama")]}
        assert autofill.compute(incident_schema, branch_user, master) == {"unit_kerja": "KCU-01"}

    def test_text_field_gets_department_name(self, autofill, branch_user):
        schema = [make_field("department", "Department")]
        assert autofill.compute(schema, branch_user) == {"department": "Kantor Cabang Utama"}

    def test_unit_fallback_when_no_department(self, autofill):
        user = UserProfile(unit=OrgUnit(name="Divisi TI"))
        schema = [make_field("unit", "Unit")]
        assert autofill.compute(schema, user) == {"unit": "Divisi TI"}

    def test_no_user_no_defaults(self, autofill, incident_schema):
        assert autofill.compute(incident_schema, None) == {}

    def test_unmatched_choice_left_empty(self, autofill):
        schema = [make_field("cabang", "Cabang", "dropdown", options=["Manado", "Bitung"])]
        user = UserProfile(department=OrgUnit(name="Jakarta"))
        assert autofill.compute(schema, user) == {}
