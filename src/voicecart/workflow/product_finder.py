"""
Product finder: spoken request → Azure AI Search → lexical ranking,
plus SKU narrowing bound to the same search settings.
"""

import asyncio
from typing import Any, Callable, Optional, Protocol, Sequence

from loguru import logger

from voicecart.catalog.query_builder import build_query
from voicecart.catalog.ranker import rank_products
from voicecart.catalog.sku_narrower import get_next_sku_attribute, get_sku_choices
from voicecart.shared.schemas_pydantic import (
    LuisResult,
    ProductSku,
    ProductSkuSelection,
    QueryOptions,
    SearchSettings,
    SkuAttributeChoice,
    SpeechResult,
)

FindProductCallback = Callable[[Optional[BaseException], Optional[list[dict[str, Any]]]], None]


class SearchBackend(Protocol):
    """Anything that can run a product query, e.g. ProductSearchClient."""

    async def search(self, index_name: str, query: QueryOptions) -> list[dict[str, Any]]: ...


class ProductFinder:
    """Facade used by the conversation layer."""

    def __init__(self, search_client: SearchBackend, settings: SearchSettings):
        self.search_client = search_client
        self.settings = settings

    async def find_product(self, speech: SpeechResult, luis: LuisResult) -> list[dict[str, Any]]:
        """Search the product index for the transcribed text and return the
        candidates tied for the best lexical match.

        Search errors are re-raised unchanged. The result is never handed
        back in the same event loop step the search completed in.
        """
        search_text = speech.header.name
        query = build_query(search_text, luis.entities, self.settings)

        try:
            results = await self.search_client.search(self.settings.index, query)
        except Exception as e:
            logger.warning(
                "Product search failed | index={} | search={!r} | error={}: {}",
                self.settings.index, query.search, type(e).__name__, e,
            )
            raise

        candidates = rank_products(search_text, results)
        logger.info(
            "Product search complete | text={!r} | results={} | candidates={}",
            search_text, len(results), len(candidates),
        )

        await asyncio.sleep(0)  # defer delivery by one loop iteration
        return candidates

    def find_product_with_callback(
        self,
        speech: SpeechResult,
        luis: LuisResult,
        callback: FindProductCallback,
    ) -> "asyncio.Task[None]":
        """Callback flavour of `find_product` for event-driven callers.

        Must be called from inside a running event loop. `callback(None, matches)`
        or `callback(error, None)` is always scheduled with `loop.call_soon`,
        so it never runs before this method has returned.
        """
        loop = asyncio.get_running_loop()

        async def _run() -> None:
            try:
                matches = await self.find_product(speech, luis)
            except Exception as e:
                loop.call_soon(callback, e, None)
                return
            loop.call_soon(callback, None, matches)

        return loop.create_task(_run())

    def get_sku_choices(self, selection: ProductSkuSelection) -> list[ProductSku]:
        return get_sku_choices(selection, self.settings)

    @staticmethod
    def get_next_sku_attribute(skus: Sequence[ProductSku]) -> Optional[SkuAttributeChoice]:
        return get_next_sku_attribute(skus)
