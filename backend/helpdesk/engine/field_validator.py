"""Field Validator - Required-field checks over raw field values"""
from typing import Dict, List, Mapping, Optional

from ..domain.errors import ValidationError
from ..domain.models import FieldDefinition, TicketDraft
from ..config.settings import settings


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


class FieldValidator:
    """
    Validate form values against a template schema

    Only presence is enforced: a required field is invalid when absent or
    blank after stripping whitespace. Number and date fields are not parsed.
    """

    def __init__(
        self,
        title_min_length: Optional[int] = None,
        description_min_length: Optional[int] = None
    ):
        self.title_min_length = (
            settings.title_min_length if title_min_length is None else title_min_length
        )
        self.description_min_length = (
            settings.description_min_length if description_min_length is None else description_min_length
        )

    def validate(
        self,
        values: Mapping[str, Optional[str]],
        schema: List[FieldDefinition]
    ) -> Dict[str, str]:
        """
        Validate custom field values

        Args:
            values: Field name -> raw value
            schema: Field definitions of the active template

        Returns:
            Field name -> error message, in schema order; empty when valid
        """
        errors: Dict[str, str] = {}
        for field in schema:
            if field.required and _is_blank(values.get(field.name)):
                errors[field.name] = f"{field.label} is required"
        return errors

    def validate_draft(self, draft: TicketDraft) -> Dict[str, str]:
        """Minimum lengths for the fixed title/description fields"""
        errors: Dict[str, str] = {}
        if len(draft.title.strip()) < self.title_min_length:
            errors["title"] = f"Title must be at least {self.title_min_length} characters"
        if len(draft.description.strip()) < self.description_min_length:
            errors["description"] = f"Description must be at least {self.description_min_length} characters"
        return errors

    def ensure_valid(
        self,
        draft: TicketDraft,
        values: Mapping[str, Optional[str]],
        schema: List[FieldDefinition]
    ) -> None:
        """Raise ValidationError carrying every field-level message"""
        errors = {**self.validate_draft(draft), **self.validate(values, schema)}
        if errors:
            raise ValidationError(
                "Please fill in all required fields",
                details={"fields": errors}
            )
