"""
Customer Domain Model

Customers are independent entities with a store-assigned id and a version
counter used for optimistic concurrency.
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional


class Customer(BaseModel):
    """
    Customer domain model

    Fields:
        id: Store-assigned customer ID (None until created)
        name: Customer name (display/sort key)
        phone: Phone number
        notes: Free-form notes
        version: Concurrency token, 1 on creation, +1 on every update
    """

    id: Optional[int] = Field(None, description="Customer ID (assigned by the store)")
    name: str = Field(..., description="Customer name")
    phone: Optional[str] = Field(None, description="Phone number")
    notes: Optional[str] = Field(None, description="Notes")
    version: int = Field(1, description="Optimistic concurrency token", ge=1)

    model_config = ConfigDict(from_attributes=True)
