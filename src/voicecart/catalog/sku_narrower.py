"""
SKU narrowing.

Reduces a product's SKU list using the entities recognized in the current
utterance and the attribute values the user explicitly confirmed, then
reports which attribute is still worth asking about.
"""

from typing import Optional, Sequence

from loguru import logger

from voicecart.shared.schemas_pydantic import (
    PRODUCT_NUMBER_KEY,
    ProductSku,
    ProductSkuSelection,
    SearchSettings,
    SkuAttributeChoice,
)


def _matches_canonical(sku: ProductSku, attribute: str, canonical: str) -> bool:
    value = sku.get(attribute)
    return value is not None and str(value).lower() == canonical


def get_sku_choices(selection: ProductSkuSelection, settings: SearchSettings) -> list[ProductSku]:
    """Narrow `selection.skus` in place and return the narrowed list.

    1. Each recognized entity mapped to a SKU attribute filters the list
       case-insensitively. A filter that would leave nothing is ignored:
       recognized evidence that matches no SKU is treated as noise.
    2. Each explicitly selected attribute/value pair then filters the list
       exactly, even down to an empty list.
    """
    skus = list(selection.skus)

    for entity in selection.entities:
        mapping = settings.mapping_for(entity.type)
        if mapping is None or not mapping.sku:
            continue

        canonical = entity.canonical_value
        if canonical is None:
            logger.debug("Entity without resolution skipped | type={}", entity.type)
            continue
        canonical = canonical.lower()

        filtered = [sku for sku in skus if _matches_canonical(sku, mapping.sku, canonical)]
        if filtered:
            skus = filtered
        else:
            logger.debug(
                "Entity filter matched no SKU, ignored | product={} | {}={}",
                selection.product, mapping.sku, canonical,
            )

    for attribute, value in selection.selected.items():
        skus = [sku for sku in skus if sku.get(attribute) == value]

    selection.skus = skus
    logger.debug(
        "SKU choices narrowed | product={} | remaining={}",
        selection.product, len(skus),
    )
    return skus


def get_next_sku_attribute(skus: Sequence[ProductSku]) -> Optional[SkuAttributeChoice]:
    """First attribute (in discovery order) with more than one distinct value
    across `skus`, or None when the SKUs no longer differ on any attribute."""
    # dict keys double as insertion-ordered sets
    values_by_attribute: dict[str, dict[str, None]] = {}

    for sku in skus:
        for attribute, value in sku.items():
            if attribute == PRODUCT_NUMBER_KEY:
                continue
            values_by_attribute.setdefault(attribute, {})[value] = None

    for attribute, values in values_by_attribute.items():
        if len(values) > 1:
            return SkuAttributeChoice(name=attribute, choices=list(values))

    return None
