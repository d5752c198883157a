"""
Field Value Store - Scoped form state for one template selection

Owned by a single form session and passed by reference to whoever renders or
edits fields. Values are held as typed variants; `raw_values()` produces the
string map used for validation and submission. Fields the user has edited are
tracked as dirty so automatic defaults never overwrite them.
"""
from typing import Dict, List, Optional, Set

from ..domain.enums import FieldType
from ..domain.errors import NotFoundError, ValidationError
from ..domain.field_values import CheckboxMultiValue, FieldValue, decode_value, empty_value
from ..domain.models import FieldDefinition


class FieldValueStore:
    """Current values of the active template's fields, keyed by field name"""

    def __init__(self, schema: Optional[List[FieldDefinition]] = None):
        self._fields: Dict[str, FieldDefinition] = {}
        self._values: Dict[str, FieldValue] = {}
        self._dirty: Set[str] = set()
        if schema:
            self.initialize(schema)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def initialize(self, schema: List[FieldDefinition]) -> None:
        """Reset and create an empty value for every field of `schema`"""
        self.clear()
        for field in schema:
            self._fields[field.name] = field
            self._values[field.name] = empty_value(field.field_type)

    def clear(self) -> None:
        """Drop all fields, values and dirty flags"""
        self._fields.clear()
        self._values.clear()
        self._dirty.clear()

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, name: object) -> bool:
        return name in self._values

    @property
    def field_names(self) -> List[str]:
        return list(self._values)

    # =========================================================================
    # Reads
    # =========================================================================

    def _field(self, name: str) -> FieldDefinition:
        field = self._fields.get(name)
        if field is None:
            raise NotFoundError(f"Unknown field '{name}'", details={"field_name": name})
        return field

    def get(self, name: str) -> FieldValue:
        self._field(name)
        return self._values[name]

    def get_raw(self, name: str) -> str:
        """Wire string for one field"""
        return self.get(name).encode()

    def selected(self, name: str) -> List[str]:
        """Selected options of a checkbox-multi field, in selection order"""
        value = self.get(name)
        if not isinstance(value, CheckboxMultiValue):
            raise ValidationError(
                f"Field '{name}' is not a multi-select field",
                details={"field_name": name}
            )
        return list(value.selected)

    def raw_values(self) -> Dict[str, str]:
        """String map of every field, in schema order"""
        return {name: value.encode() for name, value in self._values.items()}

    # =========================================================================
    # Writes
    # =========================================================================

    def set_raw(self, name: str, raw: str, by_user: bool = True) -> None:
        """Set a field from its wire string; user edits mark the field dirty"""
        field = self._field(name)
        self._values[name] = decode_value(field.field_type, "" if raw is None else str(raw))
        if by_user:
            self._dirty.add(name)

    def toggle(self, name: str, option: str, by_user: bool = True) -> str:
        """
        Toggle one option of a checkbox-multi field

        Returns:
            The re-encoded value
        """
        field = self._field(name)
        current = self._values.get(name)
        if field.field_type != FieldType.CHECKBOX_MULTI or not isinstance(current, CheckboxMultiValue):
            raise ValidationError(
                f"Field '{name}' is not a multi-select field",
                details={"field_name": name}
            )
        updated = current.toggle(option)
        self._values[name] = updated
        if by_user:
            self._dirty.add(name)
        return updated.encode()

    def apply_default(self, name: str, raw: str) -> bool:
        """
        Set a computed default unless the user already edited the field

        Returns:
            True if the value was applied
        """
        if name not in self._fields or name in self._dirty:
            return False
        self.set_raw(name, raw, by_user=False)
        return True

    # =========================================================================
    # Dirty Tracking
    # =========================================================================

    def is_dirty(self, name: str) -> bool:
        return name in self._dirty

    @property
    def dirty_fields(self) -> Set[str]:
        return set(self._dirty)
