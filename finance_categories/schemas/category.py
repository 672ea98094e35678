"""
Category Pydantic schemas for request/response validation
"""
import re
from datetime import datetime
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from finance_categories.core.config import settings
from finance_categories.core.errors import CategoryValidationError
from finance_categories.core.icons import is_known_icon
from finance_categories.models.category import CategoryType

HEX_COLOR_RE = re.compile(r"#[0-9A-Fa-f]{6}")

CATEGORY_TYPES = [t.value for t in CategoryType]


class CategoryBase(BaseModel):
    """Base schema with common fields"""
    name: str = Field(..., min_length=1, max_length=100, description="Category name")
    type: str = Field(..., description="Category type: INCOME, EXPENSE or BOTH")
    bg_color: str = Field(..., alias="bgColor", description="Background color in hex format")
    fg_color: str = Field(..., alias="fgColor", description="Foreground color in hex format")
    icon: str = Field(..., min_length=1, max_length=50, description="Icon key")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: str) -> str:
        """Validate category type"""
        if v not in CATEGORY_TYPES:
            raise PydanticCustomError(
                "category_type",
                "Type must be one of: {allowed}",
                {"allowed": ", ".join(CATEGORY_TYPES)},
            )
        return v

    @field_validator("bg_color", "fg_color")
    @classmethod
    def validate_color(cls, v: str) -> str:
        """Colors are #RRGGBB, no alpha channel, no short form"""
        if not HEX_COLOR_RE.fullmatch(v):
            raise PydanticCustomError("hex_color", "Must be a valid hex color")
        return v

    @field_validator("icon")
    @classmethod
    def validate_icon(cls, v: str) -> str:
        if settings.strict_icon_validation and not is_known_icon(v):
            raise PydanticCustomError("icon", "Unknown icon '{icon}'", {"icon": v})
        return v


class CategoryInput(CategoryBase):
    """
    Normalized create/update input

    Updates replace all five attributes, so create and update
    share this schema. The optional id is carried by edit forms.
    """
    id: Optional[str] = None


class CategoryResponse(BaseModel):
    """Schema for API response"""
    id: str
    name: str
    type: CategoryType
    bg_color: str = Field(..., alias="bgColor")
    fg_color: str = Field(..., alias="fgColor")
    icon: str
    user_id: str = Field(..., alias="userId")
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


T = TypeVar("T")


class ActionResult(BaseModel, Generic[T]):
    """
    Result envelope returned by category actions

    Callers branch on ``success``; expected failures carry ``error``
    and a machine-readable ``code`` instead of raising.
    """
    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    code: Optional[str] = None
    field_errors: Optional[Dict[str, List[str]]] = Field(None, alias="fieldErrors")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def ok(cls, data: Optional[T] = None) -> "ActionResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(
        cls,
        error: str,
        code: str,
        field_errors: Optional[Dict[str, List[str]]] = None
    ) -> "ActionResult[T]":
        return cls(success=False, error=error, code=code, field_errors=field_errors)


class SeedDefaultsResult(BaseModel):
    """Result envelope of seeding the default catalog"""
    success: bool
    added: int = 0
    skipped: int = 0
    nothing_to_add: bool = Field(False, alias="nothingToAdd")
    message: Optional[str] = None
    error: Optional[str] = None
    code: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


def validation_errors_by_field(exc: ValidationError) -> Dict[str, List[str]]:
    """Group pydantic errors by the (external) field name"""
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        loc = error.get("loc") or ()
        field = str(loc[0]) if loc else "__root__"
        errors.setdefault(field, []).append(error["msg"])
    return errors


def parse_category_input(payload: Any) -> CategoryInput:
    """
    Validate raw category input

    Raises:
        CategoryValidationError: with messages keyed by field
    """
    if isinstance(payload, CategoryInput):
        return payload
    try:
        return CategoryInput.model_validate(payload)
    except ValidationError as e:
        raise CategoryValidationError(validation_errors_by_field(e))
