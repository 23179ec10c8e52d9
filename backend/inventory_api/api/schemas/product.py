"""Pydantic models describing Product payloads."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Category(str, Enum):
    ELECTRONICS = "Electronics"
    CLOTHING = "Clothing"
    BOOKS = "Books"
    FURNITURE = "Furniture"
    SPORTS = "Sports"
    BEAUTY = "Beauty"
    HOME_KITCHEN = "Home & Kitchen"
    HEALTH_BEAUTY = "Health & Beauty"
    TOYS = "Toys"
    OTHERS = "Others"


class SortField(str, Enum):
    NAME = "name"
    PRICE = "price"
    STOCK = "stock"
    CATEGORY = "category"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class ProductBase(BaseModel):
    name: str = Field(..., min_length=3, max_length=100, description="Product name")
    description: str = Field(
        ..., min_length=10, max_length=1000, description="Product description"
    )
    price: int = Field(..., ge=1, le=1_000_000, description="Product price in cents")
    stock: int = Field(..., ge=0, le=10_000, description="Available stock quantity")
    category: Category


class ProductCreate(ProductBase):
    """Schema for new inventory products."""

    model_config = ConfigDict(extra="ignore")


class ProductUpdate(BaseModel):
    """Partial update; only the fields sent are written."""

    name: str | None = Field(None, min_length=3, max_length=100)
    description: str | None = Field(None, min_length=10, max_length=1000)
    price: int | None = Field(None, ge=1, le=1_000_000)
    stock: int | None = Field(None, ge=0, le=10_000)
    category: Category | None = None

    model_config = ConfigDict(extra="ignore")


class Product(ProductBase):
    """Product as returned to callers; the search field is never included."""

    id: str

    model_config = ConfigDict(extra="ignore")


class DeletedProduct(BaseModel):
    id: str
    deleted: bool = True


class ProductQuery(BaseModel):
    """List parameters. Page bounds are enforced by the document store."""

    page: int = 1
    limit: int = 10
    name: str | None = None
    category: Category | None = None
    min_price: int | None = Field(None, ge=0)
    max_price: int | None = Field(None, ge=0)
    sort_by: SortField = SortField.NAME
    sort_order: SortOrder = SortOrder.ASC

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProductPage(BaseModel):
    items: list[Product]
    total: int
    page: int
    limit: int
    total_pages: int
    has_next_page: bool
    has_previous_page: bool

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
