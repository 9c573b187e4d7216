from datetime import datetime, timezone
from typing import Annotated, Any, Dict, List, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for every wire schema: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def _as_utc(value: datetime) -> datetime:
    # SQLite returns naive values; everything is written in UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UtcDateTime = Annotated[datetime, AfterValidator(_as_utc)]

# largest value a signed 64-bit INTEGER column accepts
MAX_ID = 2**63 - 1


def _require_text(value: Optional[str]) -> str:
    if value is None or not value.strip():
        raise ValueError("must be a non-empty string")
    return value


class PartialUpdate(CamelModel):
    """Request body where every field is optional.

    A field left out of the body is not touched, a field sent as
    ``null`` is cleared and any other value overwrites the stored one.
    Subclasses reject ``null`` for columns that cannot be empty.
    """

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)

    def apply_to(self, target: Any) -> None:
        for name, value in self.changes().items():
            setattr(target, name, value)


# Requests


class RecipeCreate(CamelModel):
    title: str = Field(..., json_schema_extra={"example": "Tomato Soup"})
    ingredients: str = Field(
        ..., json_schema_extra={"example": "Tomatoes, Water, Salt"}
    )
    instructions: str = Field(
        ..., json_schema_extra={"example": "Chop, boil for 20 minutes, blend"}
    )
    photo_url: Optional[str] = Field(
        None, json_schema_extra={"example": "https://img.example.com/soup.jpg"}
    )
    user_id: int = Field(..., ge=1, le=MAX_ID, json_schema_extra={"example": 1})

    @field_validator("title", "ingredients", "instructions")
    @classmethod
    def not_blank(cls, v):
        return _require_text(v)


class RecipeUpdate(PartialUpdate):
    title: Optional[str] = None
    ingredients: Optional[str] = None
    instructions: Optional[str] = None
    photo_url: Optional[str] = None

    @field_validator("title", "ingredients", "instructions")
    @classmethod
    def not_blank(cls, v):
        # only runs for fields present in the body
        return _require_text(v)


class ProfileUpdate(PartialUpdate):
    bio: Optional[str] = Field(None, json_schema_extra={"example": "Home cook"})
    profile_picture: Optional[str] = Field(
        None, json_schema_extra={"example": "https://img.example.com/me.png"}
    )


class LikeCreate(CamelModel):
    user_id: int = Field(..., ge=1, le=MAX_ID)


class CommentCreate(CamelModel):
    user_id: int = Field(..., ge=1, le=MAX_ID)
    content: str = Field(..., json_schema_extra={"example": "Looks great!"})

    @field_validator("content")
    @classmethod
    def not_blank(cls, v):
        return _require_text(v)


# Responses


class UserSummary(CamelModel):
    id: int
    username: str


class ProfilePicture(CamelModel):
    profile_picture: Optional[str] = None


class Author(UserSummary):
    profile: Optional[ProfilePicture] = None


class CommentRead(CamelModel):
    id: int
    content: str
    created_at: UtcDateTime
    user: UserSummary


class LikeRead(CamelModel):
    id: int
    user: UserSummary


class RecipeRead(CamelModel):
    """Scalar recipe fields, as returned by search."""

    id: int
    title: str
    ingredients: str
    instructions: str
    photo_url: Optional[str] = None
    created_at: UtcDateTime
    updated_at: UtcDateTime


class RecipeRecord(RecipeRead):
    user_id: int


class FeedItem(RecipeRead):
    user: Author
    comments: List[CommentRead] = []
    likes: List[LikeRead] = []


class RecipeCreated(CamelModel):
    # string form of the generated id
    recipe_id: str


class ProfileRead(CamelModel):
    id: int
    user_id: int
    bio: Optional[str] = None
    profile_picture: Optional[str] = None
    updated_at: UtcDateTime


class Envelope(BaseModel):
    success: bool
    message: str
    data: Any = None
