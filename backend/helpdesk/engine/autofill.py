"""Org Unit Autofill - Pre-populate organizational-unit fields from the user profile"""
from typing import Dict, List, Mapping, Optional, Sequence

from ..domain.models import FieldDefinition, MasterDataOption, UserProfile
from ..config.settings import settings
from ..utils.logger import get_logger
from .fuzzy_matcher import MatchStrategy, TieredFuzzyMatcher

logger = get_logger(__name__)


class OrgUnitAutofill:
    """
    Compute default values for unit/department fields

    A field is an org-unit field when its name or label contains one of the
    configured keywords. Choice fields get the value of the best-matching
    option (master data when loaded, else the field's own options); free-text
    fields get the department name as-is. Nothing is written here; the caller
    applies the defaults to its value store.
    """

    def __init__(
        self,
        matcher: Optional[MatchStrategy] = None,
        keywords: Optional[Sequence[str]] = None
    ):
        self.matcher = matcher or TieredFuzzyMatcher()
        self.keywords = [k.lower() for k in (keywords or settings.autofill_unit_keywords_list)]

    def is_unit_field(self, field: FieldDefinition) -> bool:
        haystack = f"{field.name} {field.label}".lower().replace("_", " ")
        return any(keyword in haystack for keyword in self.keywords)

    def unit_fields(self, schema: Sequence[FieldDefinition]) -> List[FieldDefinition]:
        return [f for f in schema if self.is_unit_field(f)]

    @staticmethod
    def query_for(user: Optional[UserProfile]) -> Optional[str]:
        """Department name, falling back to the unit name"""
        if user is None:
            return None
        for org in (user.department, user.unit):
            if org is not None and org.name and org.name.strip():
                return org.name
        return None

    def compute(
        self,
        schema: Sequence[FieldDefinition],
        user: Optional[UserProfile],
        master_data: Optional[Mapping[str, Sequence[MasterDataOption]]] = None
    ) -> Dict[str, str]:
        """
        Args:
            schema: Active template fields
            user: Current user profile
            master_data: Field name -> loaded master-data options

        Returns:
            Field name -> raw default value for every unit field that resolved
        """
        query = self.query_for(user)
        if query is None:
            return {}

        master_data = master_data or {}
        defaults: Dict[str, str] = {}

        for field in self.unit_fields(schema):
            if not field.field_type.is_choice:
                defaults[field.name] = query
                continue

            candidates = master_data.get(field.name)
            if not candidates:
                candidates = [MasterDataOption(value=o.value, label=o.label) for o in field.options]

            match = self.matcher.find_best_match(query, candidates)
            if match is None:
                logger.info(
                    f"No option matched '{query}' for field {field.name}",
                    extra={"field_name": field.name, "action": "autofill"}
                )
                continue

            defaults[field.name] = match.value or match.text
            logger.info(
                f"Autofilled {field.name} with '{defaults[field.name]}'",
                extra={"field_name": field.name, "action": "autofill"}
            )

        return defaults
