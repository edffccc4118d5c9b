import asyncio
from types import SimpleNamespace

import pytest
from azure.core.credentials import AzureKeyCredential
from azure.core.exceptions import HttpResponseError

from voicecart.aisearch import azure_search_tools
from voicecart.aisearch.azure_search_tools import (
    ProductSearchClient,
    build_search_credential,
    create_products_index_schema,
    product_index_fields,
    upload_product_documents,
)
from voicecart.catalog.query_builder import PRODUCT_SELECT_FIELDS
from voicecart.shared.schemas_pydantic import QueryOptions

ENDPOINT = "https://unit-test.search.windows.net"


class _AsyncResults:
    def __init__(self, docs):
        self._docs = list(docs)

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for doc in self._docs:
            yield doc


class FakeAsyncSearchClient:
    def __init__(self, docs=(), error=None):
        self.docs = docs
        self.error = error
        self.kwargs = None
        self.closed = False

    async def search(self, **kwargs):
        self.kwargs = kwargs
        if self.error is not None:
            raise self.error
        return _AsyncResults(self.docs)

    async def close(self):
        self.closed = True


def _query():
    return QueryOptions(query_type="full", search='shoes +colors:"Red"', select="name, category", top=3)


def test_build_search_credential_prefers_api_key():
    credential = build_search_credential("secret")
    assert isinstance(credential, AzureKeyCredential)
    assert credential.key == "secret"


def test_product_index_fields_cover_query_projection():
    fields = {f.name: f for f in product_index_fields()}
    assert set(PRODUCT_SELECT_FIELDS) <= set(fields)
    assert fields["id"].key is True


def test_search_maps_query_options_and_collects_documents(monkeypatch):
    fake = FakeAsyncSearchClient(docs=[{"name": "Red Shoe", "@search.score": 1.2}])
    client = ProductSearchClient(endpoint=ENDPOINT, credential=AzureKeyCredential("k"))
    monkeypatch.setattr(client, "_client_for", lambda index_name: fake)

    async def scenario():
        async with client:
            return await client.search("products", _query())

    docs = asyncio.run(scenario())

    assert docs == [{"name": "Red Shoe", "@search.score": 1.2}]
    assert fake.kwargs == {
        "search_text": 'shoes +colors:"Red"',
        "query_type": "full",
        "select": ["name", "category"],
        "top": 3,
    }


def test_search_error_propagates_unchanged(monkeypatch):
    error = HttpResponseError(message="index not found")
    fake = FakeAsyncSearchClient(error=error)
    client = ProductSearchClient(endpoint=ENDPOINT, credential=AzureKeyCredential("k"))
    monkeypatch.setattr(client, "_client_for", lambda index_name: fake)

    with pytest.raises(HttpResponseError) as excinfo:
        asyncio.run(client.search("products", _query()))
    assert excinfo.value is error


def test_close_releases_sdk_clients(monkeypatch):
    fake = FakeAsyncSearchClient()
    monkeypatch.setattr(azure_search_tools, "AsyncSearchClient", lambda **kwargs: fake)
    client = ProductSearchClient(endpoint=ENDPOINT, credential=AzureKeyCredential("k"))

    async def scenario():
        await client.search("products", _query())
        await client.search("products", _query())  # same index reuses the client
        await client.close()

    asyncio.run(scenario())
    assert fake.closed is True


def test_create_products_index_schema_upserts():
    calls = []
    index_client = SimpleNamespace(create_or_update_index=lambda index: calls.append(index) or index)

    index = create_products_index_schema(index_client, "products")

    assert calls == [index]
    assert index.name == "products"


def test_upload_product_documents_counts_successes():
    results = [SimpleNamespace(key="1", succeeded=True), SimpleNamespace(key="2", succeeded=False)]
    search_client = SimpleNamespace(upload_documents=lambda documents: results)

    assert upload_product_documents(search_client, [{"id": "1"}, {"id": "2"}]) == 1
    assert upload_product_documents(search_client, []) == 0
