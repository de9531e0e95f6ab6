"""
Tag and tag-category schemas.
"""

import pytest

from validations.schema import parse_schema
from validations.tag_validation import (
    AssignTag,
    BulkAssignTags,
    CreateTag,
    CreateTagCategory,
    ListCategoriesFilter,
    ListTagsFilter,
    ReplaceQuestionTags,
    UpdateTag,
    UpdateTagCategory,
)


def test_create_category_name_messages():
    assert parse_schema(CreateTagCategory, {"name": "A"}).errors == {
        "name": "Il nome deve essere di almeno 2 caratteri"
    }
    assert parse_schema(CreateTagCategory, {"name": "A" * 101}).errors == {
        "name": "Il nome non può superare 100 caratteri"
    }
    category = CreateTagCategory(name="Argomenti")
    assert category.order == 0
    assert category.color is None


@pytest.mark.parametrize("color", ["#FF00aa", "#000000", "#abcdef"])
def test_category_color_accepts_hex(color):
    assert parse_schema(CreateTagCategory, {"name": "Materie", "color": color}).success is True


@pytest.mark.parametrize("color", ["FF00AA", "#FFF", "#GGGGGG", "#FF00AA0", "red"])
def test_category_color_rejects_other_formats(color):
    result = parse_schema(CreateTagCategory, {"name": "Materie", "color": color})
    assert result.errors == {"color": "Colore non valido (formato: #RRGGBB)"}


def test_category_description_and_order_limits():
    assert "description" in parse_schema(CreateTagCategory, {"name": "ab", "description": "x" * 501}).errors
    assert "order" in parse_schema(CreateTagCategory, {"name": "ab", "order": -1}).errors


def test_update_category_requires_id_only():
    update = UpdateTagCategory(id="cat1", is_active=False)
    assert update.name is None
    assert update.model_dump(exclude_unset=True) == {"id": "cat1", "is_active": False}
    assert "id" in parse_schema(UpdateTagCategory, {"name": "Nuovo"}).errors
    assert "name" in parse_schema(UpdateTagCategory, {"id": "cat1", "name": "x"}).errors


def test_create_tag():
    assert parse_schema(CreateTag, {"name": ""}).errors == {"name": "Il nome è obbligatorio"}
    assert parse_schema(CreateTag, {"name": "x", "color": "#12345"}).errors == {"color": "Colore non valido"}

    tag = CreateTag(name="Genetica", color="#3366CC", category_id="cat1")
    assert tag.category_id == "cat1"


def test_update_tag():
    assert parse_schema(UpdateTag, {"id": "t1", "name": ""}).success is False
    assert parse_schema(UpdateTag, {"id": "t1", "color": "blue"}).errors == {"color": "Colore non valido"}
    assert UpdateTag(id="t1", category_id=None).category_id is None


def test_tag_assignment_payloads():
    assert AssignTag(question_id="q1", tag_id="t1").tag_id == "t1"
    assert BulkAssignTags(question_id="q1", tag_ids=["t1", "t2"]).tag_ids == ["t1", "t2"]
    # An empty list is how every tag gets removed
    assert ReplaceQuestionTags(question_id="q1", tag_ids=[]).tag_ids == []
    assert set(parse_schema(AssignTag, {}).errors) == {"question_id", "tag_id"}


def test_list_filters():
    tags = ListTagsFilter()
    assert (tags.page, tags.page_size) == (1, 50)
    assert tags.include_inactive is False
    assert parse_schema(ListTagsFilter, {"page_size": 200}).success is True
    assert parse_schema(ListTagsFilter, {"page_size": 201}).success is False
    assert parse_schema(ListTagsFilter, {"page": 0}).success is False

    assert ListCategoriesFilter().include_inactive is False
