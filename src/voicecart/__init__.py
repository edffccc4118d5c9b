from voicecart.catalog.query_builder import build_query, get_entity_scopes
from voicecart.catalog.ranker import rank_products, tokenize
from voicecart.catalog.sku_narrower import get_next_sku_attribute, get_sku_choices
from voicecart.shared.schemas_pydantic import (
    Entity,
    EntityScopeMapping,
    LuisResult,
    ProductSkuSelection,
    QueryOptions,
    SearchSettings,
    SkuAttributeChoice,
    SpeechResult,
)
from voicecart.workflow.product_finder import ProductFinder

# The Azure search client is NOT imported here so the matching core can be
# used (and tested) without Azure credentials configured.

__version__ = "0.1.0"

__all__ = [
    "build_query",
    "get_entity_scopes",
    "rank_products",
    "tokenize",
    "get_sku_choices",
    "get_next_sku_attribute",
    "Entity",
    "EntityScopeMapping",
    "LuisResult",
    "ProductSkuSelection",
    "QueryOptions",
    "SearchSettings",
    "SkuAttributeChoice",
    "SpeechResult",
    "ProductFinder",
]
