"""
Order Domain Models

An Order owns its OrderDetail lines; both are persisted and mutated as one
unit by OrderRepository. Also holds the whitelisted sort options accepted by
order search.
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from datetime import date
from decimal import Decimal
from enum import Enum


class OrderDetail(BaseModel):
    """
    Order line item

    Fields:
        detail_id: Store-assigned line ID (None until persisted)
        order_id: Owning order ID (back-reference, re-stamped on every read/write)
        product_code: Product code; a blank code marks an empty row that is never stored
        product_name: Product name captured at order time
        unit_price: Price per unit captured at order time
        quantity: Units ordered
    """

    detail_id: Optional[int] = Field(None, description="Line ID")
    order_id: Optional[int] = Field(None, description="Owning order ID")
    product_code: Optional[str] = Field(None, description="Product code")
    product_name: Optional[str] = Field(None, description="Product name at order time")
    unit_price: Decimal = Field(Decimal("0"), description="Price per unit")
    quantity: int = Field(0, description="Quantity ordered")

    model_config = ConfigDict(from_attributes=True)

    @property
    def is_blank(self) -> bool:
        """True for placeholder rows without a product code"""
        return not (self.product_code or "").strip()

    @property
    def amount(self) -> Decimal:
        return self.unit_price * self.quantity

    def to_dict(self) -> dict:
        data = self.model_dump()
        data['unit_price'] = float(data['unit_price'])
        data['amount'] = float(self.amount)
        return data


class Order(BaseModel):
    """
    Order domain model - header plus its line items

    Fields:
        id: Store-assigned order ID (None until created)
        order_date: Date the order was placed
        customer_id: Ordering customer
        customer_name: Customer name captured at order time (not re-derived)
        total_amount: Sum of unit_price * quantity over stored details;
            recomputed on every write, the caller's value is ignored
        notes: Free-form notes
        version: Concurrency token, 1 on creation, +1 on every update
        details: Line items (empty for header-only listings)
    """

    id: Optional[int] = Field(None, description="Order ID")
    order_date: date = Field(..., description="Order date")
    customer_id: Optional[int] = Field(None, description="Customer ID")
    customer_name: Optional[str] = Field(None, description="Customer name at order time")
    total_amount: Decimal = Field(Decimal("0"), description="Order total")
    notes: Optional[str] = Field(None, description="Notes")
    version: int = Field(1, description="Optimistic concurrency token", ge=1)
    details: List[OrderDetail] = Field(default_factory=list, description="Line items")

    model_config = ConfigDict(from_attributes=True)

    def persistable_details(self) -> List[OrderDetail]:
        """Details that will actually be stored (blank product codes dropped)"""
        return [detail for detail in self.details if not detail.is_blank]

    def compute_total(self) -> Decimal:
        return sum((detail.amount for detail in self.persistable_details()), Decimal("0"))

    def stamp_order_id(self) -> None:
        """Point every detail's back-reference at this order"""
        for detail in self.details:
            detail.order_id = self.id

    def to_dict(self) -> dict:
        """Convert to dictionary with Decimal to float conversion"""
        data = self.model_dump(exclude={'details'})
        data['total_amount'] = float(data['total_amount'])
        data['order_date'] = self.order_date.isoformat()
        data['details'] = [detail.to_dict() for detail in self.details]
        return data


class OrderSortColumn(str, Enum):
    """Columns order search may be sorted by. Anything else means ORDER_DATE."""

    ID = "id"
    ORDER_DATE = "order_date"
    CUSTOMER_NAME = "customer_name"
    TOTAL_AMOUNT = "total_amount"

    @classmethod
    def resolve(cls, value: Optional[str]) -> "OrderSortColumn":
        if not value:
            return cls.ORDER_DATE

        token = value.strip().lower().replace("-", "_").replace(" ", "_")
        if token == "order_id":
            return cls.ID
        for column in cls:
            if column.value == token:
                return column
        return cls.ORDER_DATE


class SortDirection(str, Enum):
    ASC = "ASC"
    DESC = "DESC"

    @classmethod
    def resolve(cls, value: Optional[str]) -> "SortDirection":
        """'ascending' (or 'asc'), any case, is ascending; everything else descending"""
        if value and value.strip().lower() in ("ascending", "asc"):
            return cls.ASC
        return cls.DESC
