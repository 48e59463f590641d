from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Response models exposed with camelCase keys (prevLink, hasNextPage, ...)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProductCreate(BaseModel):
    """Request model for adding a product."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    code: str = Field(min_length=1)
    price: float = Field(ge=0)
    category: str = Field(min_length=1)
    stock: int = Field(default=0, ge=0)
    status: bool = True
    thumbnails: List[str] = Field(default_factory=list)


class ProductUpdate(BaseModel):
    """Request model for a partial product update. Only provided fields change."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = Field(default=None, min_length=1)
    code: Optional[str] = Field(default=None, min_length=1)
    price: Optional[float] = Field(default=None, ge=0)
    category: Optional[str] = Field(default=None, min_length=1)
    stock: Optional[int] = Field(default=None, ge=0)
    status: Optional[bool] = None
    thumbnails: Optional[List[str]] = None

    def changes(self) -> dict:
        return {k: v for k, v in self.model_dump(exclude_unset=True).items() if v is not None}


class ProductOut(BaseModel):
    """Response model for a product."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str
    code: str
    price: float
    stock: int
    category: str
    status: bool
    thumbnails: List[str] = Field(default_factory=list)


class ProductResponse(BaseModel):
    status: Literal["success"] = "success"
    payload: ProductOut


class PageResult(CamelModel):
    """One page of catalog results plus navigation metadata."""

    status: Literal["success"] = "success"
    payload: List[ProductOut]
    total_docs: int
    limit: int
    total_pages: int
    page: int
    prev_page: Optional[int] = None
    next_page: Optional[int] = None
    has_prev_page: bool
    has_next_page: bool
    prev_link: Optional[str] = None
    next_link: Optional[str] = None


class ErrorResult(BaseModel):
    status: Literal["error"] = "error"
    message: str


class CartLineIn(BaseModel):
    product: int
    quantity: int = Field(gt=0)


class CartLineOut(BaseModel):
    product: int
    quantity: int


class CartOut(BaseModel):
    """Response model for a stored cart."""

    id: str
    products: List[CartLineOut]


class PopulatedCartLine(BaseModel):
    product: Optional[ProductOut]
    quantity: int


class PopulatedCartOut(BaseModel):
    """Cart with each line's product resolved; deleted products resolve to null."""

    id: str
    products: List[PopulatedCartLine]


class AddProductRequest(BaseModel):
    quantity: int = Field(default=1, gt=0)


class UpdateQuantityRequest(BaseModel):
    quantity: int = Field(gt=0)


class ReplaceCartRequest(BaseModel):
    products: List[CartLineIn]


class CartSummaryLine(CamelModel):
    product: ProductOut
    quantity: int
    subtotal: Decimal


class CartSummaryOut(CamelModel):
    """Aggregated cart totals."""

    cart_id: str
    lines: List[CartSummaryLine]
    total: Decimal
    item_count: int
    has_products: bool


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str
    service: str
    version: str
