from conftest import make_entity

from voicecart.catalog.query_builder import build_query, get_entity_scopes
from voicecart.shared.schemas_pydantic import Entity


def test_build_query_without_entities_keeps_trailing_space(settings):
    query = build_query("red running shoes", [], settings)

    assert query.query_type == "full"
    assert query.search == "red running shoes "
    assert query.select == "name,category,colors,sizes,sex,products,description"
    assert query.top == 3


def test_build_query_empty_text(settings):
    query = build_query("", [make_entity("color", "Red")], settings)
    assert query.search == ' +colors:"Red"'


def test_entity_scopes_only_for_scoped_mappings(settings):
    entities = [
        make_entity("color", "Red"),
        make_entity("material", "Leather"),  # sku only, no scope
        make_entity("brand", "Acme"),  # neither
        make_entity("unknown", "whatever"),  # not configured
        make_entity("sex", "Women"),
    ]
    assert get_entity_scopes(entities, settings) == '+colors:"Red" +sex:"Women"'


def test_entity_scopes_keep_display_case_and_escape_quotes(settings):
    entities = [make_entity("size", 'XL "Tall"')]
    assert get_entity_scopes(entities, settings) == '+sizes:"XL \\"Tall\\""'


def test_entity_without_resolution_is_skipped(settings):
    entities = [Entity(type="color", resolution={})]
    assert get_entity_scopes(entities, settings) == ""


def test_build_query_appends_scopes(settings):
    query = build_query("running shoes", [make_entity("color", "Red")], settings)
    assert query.search == 'running shoes +colors:"Red"'
