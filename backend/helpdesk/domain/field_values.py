"""
Field Values - Tagged variants per field type

Values are held natively while a form is being edited and only become the
string form of the wire format at the serialization boundary (`encode` /
`decode_value`). Checkbox-multi is an ordered list of selected option values
encoded as a comma-joined string; option values never contain the delimiter.
"""
from typing import Annotated, List, Literal, Union
from pydantic import BaseModel, Field

from .enums import FieldType

MULTI_VALUE_DELIMITER = ","


def encode_multi(selected: List[str]) -> str:
    """Join selected option values in selection order"""
    return MULTI_VALUE_DELIMITER.join(selected)


def decode_multi(raw: str) -> List[str]:
    """Split an encoded multi value; empty segments and repeats are dropped"""
    selected: List[str] = []
    for part in raw.split(MULTI_VALUE_DELIMITER):
        if part and part not in selected:
            selected.append(part)
    return selected


def toggle_selection(selected: List[str], option: str) -> List[str]:
    """Append `option` if absent, otherwise remove it. Returns a new list."""
    if option in selected:
        return [value for value in selected if value != option]
    return [*selected, option]


class ScalarValue(BaseModel):
    """Single string value; the text is kept verbatim"""
    text: str = ""

    def encode(self) -> str:
        return self.text

    def is_blank(self) -> bool:
        return not self.text.strip()


class TextValue(ScalarValue):
    kind: Literal[FieldType.TEXT] = FieldType.TEXT


class TextareaValue(ScalarValue):
    kind: Literal[FieldType.TEXTAREA] = FieldType.TEXTAREA


class NumberValue(ScalarValue):
    kind: Literal[FieldType.NUMBER] = FieldType.NUMBER


class DateValue(ScalarValue):
    kind: Literal[FieldType.DATE] = FieldType.DATE


class DateTimeValue(ScalarValue):
    kind: Literal[FieldType.DATETIME] = FieldType.DATETIME


class DropdownValue(ScalarValue):
    kind: Literal[FieldType.DROPDOWN] = FieldType.DROPDOWN


class RadioValue(ScalarValue):
    kind: Literal[FieldType.RADIO] = FieldType.RADIO


class CheckboxSingleValue(ScalarValue):
    kind: Literal[FieldType.CHECKBOX_SINGLE] = FieldType.CHECKBOX_SINGLE


class CheckboxMultiValue(BaseModel):
    """Ordered set of selected option values"""
    kind: Literal[FieldType.CHECKBOX_MULTI] = FieldType.CHECKBOX_MULTI
    selected: List[str] = Field(default_factory=list)

    def encode(self) -> str:
        return encode_multi(self.selected)

    def is_blank(self) -> bool:
        return not self.selected

    def toggle(self, option: str) -> "CheckboxMultiValue":
        return CheckboxMultiValue(selected=toggle_selection(self.selected, option))


FieldValue = Annotated[
    Union[
        TextValue, TextareaValue, NumberValue, DateValue, DateTimeValue,
        DropdownValue, RadioValue, CheckboxSingleValue, CheckboxMultiValue,
    ],
    Field(discriminator="kind"),
]

_SCALAR_VARIANTS = {
    FieldType.TEXT: TextValue,
    FieldType.TEXTAREA: TextareaValue,
    FieldType.NUMBER: NumberValue,
    FieldType.DATE: DateValue,
    FieldType.DATETIME: DateTimeValue,
    FieldType.DROPDOWN: DropdownValue,
    FieldType.RADIO: RadioValue,
    FieldType.CHECKBOX_SINGLE: CheckboxSingleValue,
}


def empty_value(field_type: FieldType) -> FieldValue:
    """Initial value for a freshly loaded field"""
    if field_type == FieldType.CHECKBOX_MULTI:
        return CheckboxMultiValue()
    return _SCALAR_VARIANTS.get(field_type, TextValue)()


def decode_value(field_type: FieldType, raw: str) -> FieldValue:
    """Build the variant for `field_type` from its wire string"""
    if field_type == FieldType.CHECKBOX_MULTI:
        return CheckboxMultiValue(selected=decode_multi(raw))
    return _SCALAR_VARIANTS.get(field_type, TextValue)(text=raw)
