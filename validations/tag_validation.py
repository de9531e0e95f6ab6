"""
Question tag and tag-category schemas.
"""

import re
from typing import Annotated, List, Optional

from pydantic import AfterValidator, BaseModel, Field, NonNegativeInt

from validations.schema import max_length, min_length

HEX_COLOR_PATTERN = re.compile(r"#[0-9A-Fa-f]{6}")


def _hex_color(message: str) -> AfterValidator:
    def check(value: str) -> str:
        if not HEX_COLOR_PATTERN.fullmatch(value):
            raise ValueError(message)
        return value
    return AfterValidator(check)


CategoryColor = Annotated[str, _hex_color("Colore non valido (formato: #RRGGBB)")]
TagColor = Annotated[str, _hex_color("Colore non valido")]
Description = Annotated[str, Field(max_length=500)]


class CreateTagCategory(BaseModel):
    name: Annotated[
        str,
        min_length(2, "Il nome deve essere di almeno 2 caratteri"),
        max_length(100, "Il nome non può superare 100 caratteri"),
    ]
    description: Optional[Description] = None
    color: Optional[CategoryColor] = None
    order: NonNegativeInt = 0


class UpdateTagCategory(BaseModel):
    id: str
    name: Optional[Annotated[str, Field(min_length=2, max_length=100)]] = None
    description: Optional[Description] = None
    color: Optional[CategoryColor] = None
    order: Optional[NonNegativeInt] = None
    is_active: Optional[bool] = None


class CreateTag(BaseModel):
    name: Annotated[
        str,
        min_length(1, "Il nome è obbligatorio"),
        max_length(100, "Il nome non può superare 100 caratteri"),
    ]
    description: Optional[Description] = None
    color: Optional[TagColor] = None
    category_id: Optional[str] = None


class UpdateTag(BaseModel):
    id: str
    name: Optional[Annotated[str, Field(min_length=1, max_length=100)]] = None
    description: Optional[Description] = None
    color: Optional[TagColor] = None
    category_id: Optional[str] = None
    is_active: Optional[bool] = None


class AssignTag(BaseModel):
    question_id: str
    tag_id: str


class BulkAssignTags(BaseModel):
    question_id: str
    tag_ids: List[str]


class ReplaceQuestionTags(BaseModel):
    """Replaces every tag on a question. An empty list removes them all."""
    question_id: str
    tag_ids: List[str]


class ListTagsFilter(BaseModel):
    category_id: Optional[str] = None
    uncategorized: Optional[bool] = None  # only tags without a category
    search: Optional[str] = None
    include_inactive: bool = False
    page: Annotated[int, Field(ge=1)] = 1
    page_size: Annotated[int, Field(ge=1, le=200)] = 50


class ListCategoriesFilter(BaseModel):
    search: Optional[str] = None
    include_inactive: bool = False
