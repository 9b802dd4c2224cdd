# product_api/api/v1/schemas/product.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class ProductOut(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    price: float
    category: str
    inStock: bool


class ProductPageOut(BaseModel):
    products: list[ProductOut]
    totalProducts: int
    totalPages: int
    currentPage: int
    pageSize: int


class CategoryCountOut(BaseModel):
    # aggregation output shape: {_id: <category>, count: n}
    id: str = Field(alias="_id")
    count: int

    model_config = ConfigDict(populate_by_name=True)


class MessageOut(BaseModel):
    message: str
