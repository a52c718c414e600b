"""
Request body schemas.

Bodies arrive in camelCase and are dumped in snake_case, ready to be passed
to the storage layer. Unknown fields are rejected. ``*Update`` schemas accept
any subset of fields but refuse ``null`` for columns that cannot be empty.
"""
import base64
import binascii
import json
from typing import Any, Dict, List, Optional

from pydantic import (
    AliasChoices, BaseModel, ConfigDict, EmailStr, Field, ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel


class RequestSchema(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        str_strip_whitespace=True,
    )

    def sent_fields(self):
        """Only the fields the client actually sent."""
        return self.model_dump(exclude_unset=True)


def _reject_null(value):
    if value is None:
        raise ValueError("Field may not be null")
    return value


def format_errors(error: ValidationError):
    return [
        {
            "field": ".".join(str(part) for part in err["loc"]),
            "message": err["msg"],
        }
        for err in error.errors()
    ]


## AUTH ##

class RegisterSchema(RequestSchema):
    model_config = ConfigDict(str_strip_whitespace=False)

    username: str = Field(min_length=3, max_length=50)
    password: str = Field(min_length=6, max_length=128)
    email: Optional[EmailStr] = None
    full_name: Optional[str] = Field(default=None, max_length=100)


class LoginSchema(RequestSchema):
    model_config = ConfigDict(str_strip_whitespace=False)

    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


## CONTACT ##

class ContactSchema(RequestSchema):
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    subject: str = Field(min_length=1, max_length=255)
    message: str = Field(min_length=1)
    terms: bool

    @field_validator("terms")
    @classmethod
    def terms_must_be_accepted(cls, value):
        if value is not True:
            raise ValueError("You must agree to our terms")
        return value


## SETTINGS ##

class SiteSettingSchema(RequestSchema):
    key: str = Field(min_length=1, max_length=100)
    value: Optional[str]
    type: str = Field(default="text", max_length=20)

    @field_validator("value", mode="before")
    @classmethod
    def stringify_value(cls, value):
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float)):
            return str(value)
        if isinstance(value, (dict, list)):
            return json.dumps(value)
        return value


## ASSETS ##

def _strip_data_url(value):
    if isinstance(value, str) and value.startswith("data:") and "," in value:
        return value.split(",", 1)[1]
    return value


def _check_base64(value):
    try:
        base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError):
        raise ValueError("Data must be base64 encoded")
    return value


class AssetUploadSchema(RequestSchema):
    name: str = Field(min_length=1, max_length=255)
    section: str = Field(min_length=1, max_length=50)
    content_type: str = Field(min_length=1, max_length=100)
    data: str = Field(min_length=1)

    @field_validator("data", mode="before")
    @classmethod
    def strip_data_url(cls, value):
        return _strip_data_url(value)

    @field_validator("data")
    @classmethod
    def data_is_base64(cls, value):
        return _check_base64(value)


class AssetUpdateSchema(RequestSchema):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    section: Optional[str] = Field(default=None, min_length=1, max_length=50)
    content_type: Optional[str] = Field(default=None, min_length=1, max_length=100)
    data: Optional[str] = Field(default=None, min_length=1)

    @field_validator("data", mode="before")
    @classmethod
    def strip_data_url(cls, value):
        return _strip_data_url(value)

    @field_validator("name", "section", "content_type", "data")
    @classmethod
    def not_null(cls, value):
        return _reject_null(value)

    @field_validator("data")
    @classmethod
    def data_is_base64(cls, value):
        return _check_base64(value)


## SINGLETON CONTENT ##

class HeroContentSchema(RequestSchema):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    subtitle: Optional[str] = None
    description: Optional[str] = None
    button_text: Optional[str] = None
    button_link: Optional[str] = None
    image_id: Optional[int] = None

    @field_validator("title")
    @classmethod
    def not_null(cls, value):
        return _reject_null(value)


class AboutContentSchema(RequestSchema):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    subtitle: Optional[str] = None
    description: Optional[str] = None
    content: Optional[str] = None
    image_id: Optional[int] = None

    @field_validator("title")
    @classmethod
    def not_null(cls, value):
        return _reject_null(value)


## COLLECTIONS ##

class ServiceItemCreate(RequestSchema):
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    icon: Optional[str] = None
    order: Optional[int] = None


class ServiceItemUpdate(RequestSchema):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    icon: Optional[str] = None
    order: Optional[int] = None

    @field_validator("title", "order")
    @classmethod
    def not_null(cls, value):
        return _reject_null(value)


def _split_features(value):
    # The admin form sends a comma-separated string or an array
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return value


class ProductItemCreate(RequestSchema):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[str] = None
    features: List[str] = Field(default_factory=list)
    bg_color: Optional[str] = None
    button_color: Optional[str] = None
    image_id: Optional[int] = None
    order: Optional[int] = None

    @field_validator("features", mode="before")
    @classmethod
    def split_features(cls, value):
        return _split_features(value)


class ProductItemUpdate(RequestSchema):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[str] = None
    features: Optional[List[str]] = None
    bg_color: Optional[str] = None
    button_color: Optional[str] = None
    image_id: Optional[int] = None
    order: Optional[int] = None

    @field_validator("features", mode="before")
    @classmethod
    def split_features(cls, value):
        return _split_features(value)

    @field_validator("name", "features", "order")
    @classmethod
    def not_null(cls, value):
        return _reject_null(value)


_SOCIAL_ALIASES = AliasChoices("socialLinks", "social", "social_links")


class TeamMemberCreate(RequestSchema):
    name: str = Field(min_length=1, max_length=200)
    role: str = Field(min_length=1, max_length=200)
    bio: Optional[str] = None
    social_links: Optional[Dict[str, Optional[str]]] = Field(
        default=None, validation_alias=_SOCIAL_ALIASES
    )
    image_id: Optional[int] = None
    order: Optional[int] = None


class TeamMemberUpdate(RequestSchema):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    role: Optional[str] = Field(default=None, min_length=1, max_length=200)
    bio: Optional[str] = None
    social_links: Optional[Dict[str, Optional[str]]] = Field(
        default=None, validation_alias=_SOCIAL_ALIASES
    )
    image_id: Optional[int] = None
    order: Optional[int] = None

    @field_validator("name", "role", "order")
    @classmethod
    def not_null(cls, value):
        return _reject_null(value)


class TestimonialItemCreate(RequestSchema):
    content: str = Field(min_length=1)
    author: str = Field(min_length=1, max_length=200)
    position: Optional[str] = None
    company: Optional[str] = None
    image_id: Optional[int] = None
    order: Optional[int] = None


class TestimonialItemUpdate(RequestSchema):
    content: Optional[str] = Field(default=None, min_length=1)
    author: Optional[str] = Field(default=None, min_length=1, max_length=200)
    position: Optional[str] = None
    company: Optional[str] = None
    image_id: Optional[int] = None
    order: Optional[int] = None

    @field_validator("content", "author", "order")
    @classmethod
    def not_null(cls, value):
        return _reject_null(value)


class PortfolioItemCreate(RequestSchema):
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    category: Optional[str] = None
    image_id: Optional[int] = None
    order: Optional[int] = None


class PortfolioItemUpdate(RequestSchema):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    category: Optional[str] = None
    image_id: Optional[int] = None
    order: Optional[int] = None

    @field_validator("title", "order")
    @classmethod
    def not_null(cls, value):
        return _reject_null(value)


class FaqItemCreate(RequestSchema):
    question: str = Field(min_length=1)
    answer: str = Field(min_length=1)
    order: Optional[int] = None


class FaqItemUpdate(RequestSchema):
    question: Optional[str] = Field(default=None, min_length=1)
    answer: Optional[str] = Field(default=None, min_length=1)
    order: Optional[int] = None

    @field_validator("question", "answer", "order")
    @classmethod
    def not_null(cls, value):
        return _reject_null(value)


# collection name -> (create schema, update schema, singular label for messages)
COLLECTION_SCHEMAS: Dict[str, Any] = {
    "services": (ServiceItemCreate, ServiceItemUpdate, "service"),
    "products": (ProductItemCreate, ProductItemUpdate, "product"),
    "team": (TeamMemberCreate, TeamMemberUpdate, "team member"),
    "testimonials": (TestimonialItemCreate, TestimonialItemUpdate, "testimonial"),
    "portfolio": (PortfolioItemCreate, PortfolioItemUpdate, "portfolio item"),
    "faq": (FaqItemCreate, FaqItemUpdate, "FAQ item"),
}
