"""Builds the Azure AI Search query for a spoken product request."""

from typing import Sequence

from loguru import logger

from voicecart.shared.schemas_pydantic import Entity, QueryOptions, SearchSettings

# Fields returned for each product candidate
PRODUCT_SELECT_FIELDS: tuple[str, ...] = (
    "name",
    "category",
    "colors",
    "sizes",
    "sex",
    "products",
    "description",
)
PRODUCT_RESULT_CAP = 3


def _escape_phrase(value: str) -> str:
    """Escape a value for use inside a quoted Lucene phrase."""
    return value.replace("\\", "\\\\").replace('"', '\\"')


def get_entity_scopes(entities: Sequence[Entity], settings: SearchSettings) -> str:
    """Scope expression restricting the search to documents whose mapped
    field contains each recognized entity value.

    Each scoped entity becomes a required clause `+<field>:"<value>"`.
    Entities without a configured scope (or without a resolution) are skipped.
    """
    fragments: list[str] = []

    for entity in entities:
        mapping = settings.mapping_for(entity.type)
        if mapping is None or not mapping.scope:
            continue

        canonical = entity.canonical_value
        if canonical is None:
            logger.debug("Entity without resolution skipped | type={}", entity.type)
            continue

        fragments.append(f'+{mapping.scope}:"{_escape_phrase(canonical)}"')

    return " ".join(fragments)


def build_query(search_text: str, entities: Sequence[Entity], settings: SearchSettings) -> QueryOptions:
    """Full-syntax product query: transcribed text, one space, scope expression."""
    entity_scopes = get_entity_scopes(entities, settings)

    return QueryOptions(
        query_type="full",
        search=f"{search_text} {entity_scopes}",
        select=",".join(PRODUCT_SELECT_FIELDS),
        top=PRODUCT_RESULT_CAP,
    )
