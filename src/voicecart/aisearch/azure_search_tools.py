"""
Azure AI Search Product Index Management, Document Ingestion & Product Search
Handles schema creation, catalog upload, and the full-syntax product query
used by the product finder.
"""

from typing import Any, Sequence

# Azure SDK imports
from azure.core.credentials import AzureKeyCredential  # Key-based auth
from azure.identity import DefaultAzureCredential as SyncDefaultAzureCredential
from azure.identity.aio import DefaultAzureCredential  # Managed identity auth (async)

# Async client performs search operations (queries) against an index.
from azure.search.documents.aio import SearchClient as AsyncSearchClient

# Sync clients: documents upload & index schema management (one-off tasks).
from azure.search.documents import SearchClient
from azure.search.documents.indexes import SearchIndexClient
from azure.search.documents.indexes.models import (
    SearchFieldDataType,  # Enum for search field data types
    SearchField,  # Defines individual fields in an index schema
    SearchIndex,  # SearchIndex is the schema definition for an index
    SimpleField,  # Non-searchable field (key, filters, payloads)
    SearchableField,  # Full-text searchable field
)
from loguru import logger

from voicecart.shared.schemas_pydantic import QueryOptions
from voicecart.shared.settings import get_search_api_key, get_search_endpoint


# ============================================================================
# CREDENTIALS
# ============================================================================


def build_search_credential(api_key: str | None = None) -> Any:
    """AzureKeyCredential when a key is configured, otherwise the async
    DefaultAzureCredential (managed identity, az login, env)."""
    api_key = api_key if api_key is not None else get_search_api_key()
    if api_key:
        return AzureKeyCredential(api_key)
    return DefaultAzureCredential()


# ============================================================================
# FIELD DEFINITIONS
# ============================================================================


def product_index_fields() -> list[SearchField]:
    """
    Defines schema for the products index.
    Matches the projection requested by the product query builder.
    """
    return [
        SimpleField(
            name="id",
            type=SearchFieldDataType.String,
            key=True,
            filterable=True,
        ),  # Unique identifier
        SearchableField(
            name="name",
        ),  # Product name, also used for lexical ranking
        SearchableField(
            name="category",
            filterable=True,
            facetable=True,
        ),  # Shoes, jackets, etc.
        SearchableField(
            name="colors",
            collection=True,
            filterable=True,
            facetable=True,
        ),  # Available colors
        SearchableField(
            name="sizes",
            collection=True,
            filterable=True,
            facetable=True,
        ),  # Available sizes
        SearchableField(
            name="sex",
            filterable=True,
            facetable=True,
        ),  # Target group
        SimpleField(
            name="products",
            type=SearchFieldDataType.String,
        ),  # SKU list as a JSON payload, consumed by the SKU narrower
        SearchableField(
            name="description",
        ),  # Product details
    ]


# ============================================================================
# INDEX SCHEMA CREATION & DOCUMENT INGESTION
# ============================================================================


def create_index_client(endpoint: str | None = None, api_key: str | None = None) -> SearchIndexClient:
    """Sync index management client. Requires an API key or az login."""
    endpoint = endpoint or get_search_endpoint()
    api_key = api_key if api_key is not None else get_search_api_key()
    if api_key:
        return SearchIndexClient(endpoint=endpoint, credential=AzureKeyCredential(api_key))

    return SearchIndexClient(endpoint=endpoint, credential=SyncDefaultAzureCredential())


def create_products_index_schema(index_client: SearchIndexClient, index_name: str) -> SearchIndex:
    """
    Creates or updates the products search index schema.
    Azure AI Search will update existing index if already present.
    """
    index = SearchIndex(
        name=index_name,  # Index identifier
        fields=product_index_fields(),  # Field definitions
    )
    result = index_client.create_or_update_index(index)  # Upsert index
    logger.info("Index created/updated | index={}", index_name)
    return result


def upload_product_documents(
    search_client: SearchClient,
    documents: list[dict[str, Any]],
) -> int:
    """
    Uploads product documents to the index bound to `search_client`.
    Uses batch upload. Returns the number of documents that succeeded.
    """
    if not documents:
        logger.warning("No product documents to upload")
        return 0

    results = search_client.upload_documents(documents=documents)  # Batch upload
    succeeded = sum(1 for r in results if r.succeeded)

    if succeeded < len(documents):
        failed_keys = [r.key for r in results if not r.succeeded]
        logger.warning(
            "Product upload partially failed | uploaded={} | failed_keys={}",
            succeeded, failed_keys,
        )
    else:
        logger.info("Product upload complete | uploaded={}", succeeded)

    return succeeded


# ============================================================================
# SEARCH OPERATIONS (for the product finder)
# ============================================================================


class ProductSearchClient:
    """Async full-text search against Azure AI Search indexes.

    One SDK client is opened lazily per index name and reused. Use as an
    async context manager (or call `close()`) to release connections.
    Errors raised by the SDK propagate unchanged; there is no local retry
    beyond the SDK's own pipeline policy.
    """

    def __init__(self, endpoint: str | None = None, credential: Any = None):
        self._endpoint = endpoint or get_search_endpoint()
        self._credential = credential if credential is not None else build_search_credential()
        self._clients: dict[str, AsyncSearchClient] = {}

    def _client_for(self, index_name: str) -> AsyncSearchClient:
        client = self._clients.get(index_name)
        if client is None:
            client = AsyncSearchClient(
                endpoint=self._endpoint,
                index_name=index_name,
                credential=self._credential,
            )
            self._clients[index_name] = client
        return client

    async def search(self, index_name: str, query: QueryOptions) -> list[dict[str, Any]]:
        """Run `query` against `index_name` and return the result documents."""
        client = self._client_for(index_name)

        search_kwargs: dict[str, Any] = {
            "search_text": query.search,  # Free text + scope expression
            "query_type": query.query_type,  # 'full' = Lucene syntax
            "select": _split_select(query.select),  # Field projection
            "top": query.top,  # Result cap
        }
        logger.debug("Searching | index={} | search={!r} | top={}", index_name, query.search, query.top)

        results = await client.search(**search_kwargs)

        # Convert results to list of dictionaries, containing only the document fields
        return [dict(result) async for result in results]

    async def close(self) -> None:
        for client in self._clients.values():
            await client.close()
        self._clients.clear()

        close_credential = getattr(self._credential, "close", None)
        if close_credential is not None:
            await close_credential()

    async def __aenter__(self) -> "ProductSearchClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()


def _split_select(select: str) -> Sequence[str]:
    return [field.strip() for field in select.split(",") if field.strip()]
