"""Command-line entry point for the voice product finder.

    voicecart find "red running shoes" --entities luis.json
    voicecart narrow --skus skus.json --entities luis.json --selected '{"size": "M"}'
    voicecart create-index --catalog catalog.json
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Sequence

from loguru import logger

from voicecart.catalog.sku_narrower import get_next_sku_attribute, get_sku_choices
from voicecart.shared.logging_config import configure_logging
from voicecart.shared.schemas_pydantic import (
    LuisResult,
    ProductSkuSelection,
    SearchSettings,
    SpeechHeader,
    SpeechResult,
)
from voicecart.shared.settings import get_search_settings, load_search_settings
from voicecart.workflow.product_finder import ProductFinder


def _read_json(path: str) -> Any:
    return json.loads(Path(path).read_text(encoding="utf-8"))


def _load_luis(path: str | None) -> LuisResult:
    if not path:
        return LuisResult()
    return LuisResult.model_validate(_read_json(path))


def _settings(args: argparse.Namespace) -> SearchSettings:
    return load_search_settings(args.settings) if args.settings else get_search_settings()


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False, default=str))


async def _find(args: argparse.Namespace) -> int:
    from voicecart.aisearch.azure_search_tools import ProductSearchClient

    settings = _settings(args)
    speech = SpeechResult(header=SpeechHeader(name=args.text))
    luis = _load_luis(args.entities)

    async with ProductSearchClient() as search_client:
        finder = ProductFinder(search_client, settings)
        matches = await finder.find_product(speech, luis)

    _print_json(matches)
    return 0


def _narrow(args: argparse.Namespace) -> int:
    settings = _settings(args)

    selection = ProductSkuSelection(
        skus=_read_json(args.skus),
        entities=_load_luis(args.entities).entities,
        selected=json.loads(args.selected) if args.selected else {},
        product=args.product or "",
    )

    narrowed = get_sku_choices(selection, settings)
    next_attribute = get_next_sku_attribute(narrowed)

    _print_json({
        "skus": narrowed,
        "next_attribute": next_attribute.model_dump() if next_attribute else None,
    })
    return 0


def _create_index(args: argparse.Namespace) -> int:
    from azure.search.documents import SearchClient

    from voicecart.aisearch.azure_search_tools import (
        create_index_client,
        create_products_index_schema,
        upload_product_documents,
    )

    settings = _settings(args)
    index_client = create_index_client()
    create_products_index_schema(index_client, settings.index)

    if args.catalog:
        documents = _read_json(args.catalog)
        for doc in documents:
            # SKU lists are stored as a JSON string field
            if not isinstance(doc.get("products", ""), str):
                doc["products"] = json.dumps(doc["products"], ensure_ascii=False)

        search_client: SearchClient = index_client.get_search_client(settings.index)
        uploaded = upload_product_documents(search_client, documents)
        _print_json({"index": settings.index, "uploaded": uploaded})
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="voicecart", description=__doc__.splitlines()[0])
    parser.add_argument("--settings", help="Search settings JSON (default: $VOICECART_SEARCH_SETTINGS)")
    parser.add_argument("--log-level", default=None, help="Log level (default: $LOG_LEVEL or INFO)")
    sub = parser.add_subparsers(dest="command", required=True)

    find = sub.add_parser("find", help="Search and rank products for a transcribed utterance")
    find.add_argument("text", help="Transcribed utterance")
    find.add_argument("--entities", help="Entity-extraction result JSON file")

    narrow = sub.add_parser("narrow", help="Narrow a SKU list and show the next attribute to ask")
    narrow.add_argument("--skus", required=True, help="JSON file with the product's SKU list")
    narrow.add_argument("--entities", help="Entity-extraction result JSON file")
    narrow.add_argument("--selected", help='Confirmed attributes as JSON, e.g. \'{"size": "M"}\'')
    narrow.add_argument("--product", help="Product identifier")

    create = sub.add_parser("create-index", help="Create/update the product index")
    create.add_argument("--catalog", help="JSON list of product documents to upload")

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Parse arguments, configure logging once, and run the command."""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        if args.command == "find":
            return asyncio.run(_find(args))
        if args.command == "narrow":
            return _narrow(args)
        return _create_index(args)
    except Exception:
        logger.exception("Command failed | command={}", args.command)
        return 1


if __name__ == "__main__":
    sys.exit(main())
