"""Field Schema Registry - Resolve a template id to its ordered field definitions"""
from typing import List

from ..domain.errors import SchemaLoadError, TransportError
from ..domain.interfaces import FieldDefinitionSource
from ..domain.models import FieldDefinition
from ..utils.logger import get_logger

logger = get_logger(__name__)


class FieldSchemaRegistry:
    """
    Load and order the custom fields of a template

    Fields come back sorted by sort_order (ties keep source order). A template
    whose field names are not unique is rejected, since values are keyed by
    name. Failures propagate as SchemaLoadError and are never retried here.
    """

    def __init__(self, source: FieldDefinitionSource):
        self.source = source

    async def load_fields(self, template_id: str) -> List[FieldDefinition]:
        """
        Load field definitions for a template

        Args:
            template_id: Template (or template-backed service) id

        Returns:
            Field definitions ordered by sort_order

        Raises:
            SchemaLoadError: Unknown template, unreachable source, or invalid schema
        """
        if not template_id or not str(template_id).strip():
            raise SchemaLoadError("Unknown template: no template id given")

        try:
            fields = await self.source.get_fields(template_id)
        except SchemaLoadError:
            raise
        except TransportError as e:
            raise SchemaLoadError(
                f"Could not load fields for template {template_id}: {e.message}",
                details={"template_id": template_id}
            ) from e

        ordered = self.order_fields(fields)
        self.ensure_unique_names(template_id, ordered)

        logger.info(
            f"Loaded {len(ordered)} fields for template {template_id}",
            extra={"template_id": template_id}
        )
        return ordered

    @staticmethod
    def order_fields(fields: List[FieldDefinition]) -> List[FieldDefinition]:
        """Stable sort by sort_order"""
        return sorted(fields, key=lambda f: f.sort_order)

    @staticmethod
    def ensure_unique_names(template_id: str, fields: List[FieldDefinition]) -> None:
        seen = set()
        duplicates = []
        for field in fields:
            if field.name in seen and field.name not in duplicates:
                duplicates.append(field.name)
            seen.add(field.name)
        if duplicates:
            raise SchemaLoadError(
                f"Template {template_id} defines duplicate field names: {', '.join(duplicates)}",
                details={"template_id": template_id, "duplicates": duplicates}
            )
