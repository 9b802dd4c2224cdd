from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, field_validator
from typing import Optional, List
import uuid


def new_product_id() -> str:
    return str(uuid.uuid4())


class Product(BaseModel):
    """
    Persisted product. Wire/storage names are camelCase (inStock),
    attributes are snake_case; dump with by_alias=True.
    """
    id: StrictStr = Field(default_factory=new_product_id, min_length=1)
    name: StrictStr = Field(min_length=1)
    description: Optional[str] = None
    price: float = Field(gt=0, strict=True, allow_inf_nan=False)
    category: StrictStr = Field(min_length=1)
    in_stock: StrictBool = Field(default=True, alias="inStock")

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    def to_doc(self) -> dict:
        return self.model_dump(by_alias=True)


class ProductUpdate(BaseModel):
    """Subset of mutable fields; id is deliberately absent."""
    name: Optional[StrictStr] = Field(default=None, min_length=1)
    description: Optional[str] = None
    price: Optional[float] = Field(default=None, gt=0, strict=True, allow_inf_nan=False)
    category: Optional[StrictStr] = Field(default=None, min_length=1)
    in_stock: Optional[StrictBool] = Field(default=None, alias="inStock")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("name", "price", "category", "in_stock")
    @classmethod
    def _not_null(cls, v):
        # an explicit null would erase a required attribute
        if v is None:
            raise ValueError("may not be null")
        return v

    def to_set(self) -> dict:
        """Only the fields the caller actually supplied, under their stored names."""
        return self.model_dump(by_alias=True, exclude_unset=True)


class ProductPage(BaseModel):
    items: List[Product] = Field(serialization_alias="products")
    total_count: int = Field(ge=0, serialization_alias="totalProducts")
    total_pages: int = Field(ge=0, serialization_alias="totalPages")
    page: int = Field(ge=1, serialization_alias="currentPage")
    limit: int = Field(ge=1, serialization_alias="pageSize")

    model_config = {"frozen": True}

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)
