"""
Product Domain Model

Products are keyed by a caller-assigned code, not a store-generated id.
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from decimal import Decimal


class Product(BaseModel):
    """
    Product domain model - an entry of the product master

    Fields:
        code: Product code (natural key, chosen by the caller)
        name: Product name
        unit_price: Current unit price
        notes: Free-form notes
        version: Concurrency token, 1 on creation, +1 on every update
    """

    code: str = Field(..., description="Product code", min_length=1)
    name: str = Field(..., description="Product name")
    unit_price: Decimal = Field(Decimal("0"), description="Unit price")
    notes: Optional[str] = Field(None, description="Notes")
    version: int = Field(1, description="Optimistic concurrency token", ge=1)

    model_config = ConfigDict(from_attributes=True)

    def to_dict(self) -> dict:
        """Convert to dictionary with Decimal to float conversion"""
        data = self.model_dump()
        data['unit_price'] = float(data['unit_price'])
        return data
