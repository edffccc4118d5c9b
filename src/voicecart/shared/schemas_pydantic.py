"""
Pydantic Schemas for the voice product finder.

All payloads exchanged between the speech / entity-extraction / search
services and the matching core. Organized by stage:
Speech & Entities → Configuration → Search → SKU Selection.
"""

from types import MappingProxyType
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator

# A SKU is a flat attribute tuple (color, size, ...) plus a mandatory
# `productNumber` that is unique within the product's SKU set.
ProductSku = dict[str, str]
SkuAttributes = dict[str, str]

PRODUCT_NUMBER_KEY = "productNumber"


# ============================================================================
# 1. SPEECH & ENTITY-EXTRACTION PAYLOADS
# Only the fields the matcher reads are declared, everything else is ignored.
# ============================================================================

class SpeechHeader(BaseModel):
    """Header block of a speech recognition response."""
    model_config = ConfigDict(extra="ignore")
    name: str = Field("", description="Transcribed utterance text")


class SpeechResult(BaseModel):
    """Speech transcription result. Only `header.name` is consumed."""
    model_config = ConfigDict(extra="ignore")
    header: SpeechHeader = Field(default_factory=SpeechHeader, description="Result header")


class Entity(BaseModel):
    """Typed span recognized in an utterance, e.g. a color resolved to 'Red'.
    `resolution` maps canonical display forms (case-sensitive) to metadata."""
    model_config = ConfigDict(extra="ignore")
    type: str = Field(..., description="Entity category label, e.g. 'color'")
    entity: Optional[str] = Field(None, description="Matched text span")
    score: Optional[float] = Field(None, description="Extraction confidence")
    resolution: dict[str, Any] = Field(default_factory=dict, description="Canonical value name -> metadata")

    @field_validator("resolution", mode="before")
    @classmethod
    def _normalize_values_list(cls, v: Any) -> Any:
        """Newer extraction services send `{"values": ["Red"]}` instead of
        `{"Red": {...}}`. Turn the list form into canonical keys."""
        if v is None:
            return {}
        if isinstance(v, dict) and isinstance(v.get("values"), list):
            return {str(value): {} for value in v["values"] if isinstance(value, str)}
        return v

    @property
    def canonical_value(self) -> Optional[str]:
        """First (and conventionally only) canonical resolution key."""
        return next(iter(self.resolution), None)


class LuisResult(BaseModel):
    """Entity-extraction result for one utterance."""
    model_config = ConfigDict(extra="ignore")
    query: Optional[str] = Field(None, description="Utterance the entities came from")
    entities: list[Entity] = Field(default_factory=list, description="Recognized entities")


# ============================================================================
# 2. CONFIGURATION SCHEMAS
# Loaded once at startup and frozen afterwards.
# ============================================================================

class EntityScopeMapping(BaseModel):
    """Maps an entity type to the index field it scopes and/or the SKU
    attribute it constrains."""
    model_config = ConfigDict(frozen=True, extra="allow")
    entity: str = Field(..., description="Entity type this mapping applies to")
    scope: Optional[str] = Field(None, description="Searchable index field restricted by the entity")
    sku: Optional[str] = Field(None, description="SKU attribute constrained by the entity")


class SearchSettings(BaseModel):
    """Search index name plus the entity mapping table."""
    model_config = ConfigDict(frozen=True)
    index: str = Field(..., min_length=1, description="Azure AI Search index name")
    entities: tuple[EntityScopeMapping, ...] = Field(default=(), description="Entity scope mappings")

    _lookup: Mapping[str, EntityScopeMapping] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context: Any) -> None:
        lookup: dict[str, EntityScopeMapping] = {}
        for mapping in self.entities:
            # First declaration wins for duplicated entity types
            lookup.setdefault(mapping.entity, mapping)
        self._lookup = MappingProxyType(lookup)

    @property
    def lookup(self) -> Mapping[str, EntityScopeMapping]:
        return self._lookup

    def mapping_for(self, entity_type: str) -> Optional[EntityScopeMapping]:
        return self._lookup.get(entity_type)


# ============================================================================
# 3. SEARCH SCHEMAS
# Query sent to Azure AI Search. Result documents stay plain dicts.
# ============================================================================

class QueryOptions(BaseModel):
    """Structured product search request."""
    model_config = ConfigDict(frozen=True)
    query_type: str = Field("full", description="'full' enables Lucene query syntax")
    search: str = Field(..., description="Free text plus scope expression")
    select: str = Field(..., description="Comma-separated field projection")
    top: int = Field(3, gt=0, description="Result cap")


# ============================================================================
# 4. SKU SELECTION SCHEMAS
# Session state owned by the caller and narrowed turn by turn.
# ============================================================================

class ProductSkuSelection(BaseModel):
    """Current SKU candidates plus the evidence used to narrow them."""
    skus: list[ProductSku] = Field(default_factory=list, description="Current candidate SKUs")
    entities: list[Entity] = Field(default_factory=list, description="Entities recognized this turn")
    selected: SkuAttributes = Field(default_factory=dict, description="Attribute/value pairs confirmed by the user")
    product: str = Field("", description="Product identifier")
    attribute: Optional[str] = Field(None, description="Attribute currently being resolved")


class SkuAttributeChoice(BaseModel):
    """Next ambiguous attribute and its distinct values, in first-seen order."""
    name: str = Field(..., description="SKU attribute name")
    choices: list[str] = Field(..., min_length=2, description="Distinct values still possible")
