import pytest

from voicecart.shared.schemas_pydantic import Entity, SearchSettings


@pytest.fixture
def settings() -> SearchSettings:
    return SearchSettings.model_validate({
        "index": "products",
        "entities": [
            {"entity": "color", "scope": "colors", "sku": "color"},
            {"entity": "size", "scope": "sizes", "sku": "size"},
            {"entity": "sex", "scope": "sex"},
            {"entity": "material", "sku": "material"},
            {"entity": "brand"},
        ],
    })


def make_entity(type_: str, canonical: str) -> Entity:
    return Entity(type=type_, resolution={canonical: {}})
