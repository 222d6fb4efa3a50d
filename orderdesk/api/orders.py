"""
Orders API Endpoints
Order aggregate maintenance, search and history
"""
from fastapi import APIRouter, HTTPException, Query
from typing import Optional
from datetime import date

from orderdesk.core.exceptions import ConcurrencyConflictError
from orderdesk.domain.order import Order
from orderdesk.repositories.order_repository import OrderRepository

router = APIRouter()


@router.get("/")
async def get_orders():
    """All order headers (no details), by date, customer name, id"""
    try:
        orders = OrderRepository().find_all()

        return {
            "status": "success",
            "count": len(orders),
            "data": [order.to_dict() for order in orders]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching orders: {str(e)}")


@router.get("/search")
async def search_orders(
    start_date: date = Query(..., description="First order date (inclusive)"),
    end_date: date = Query(..., description="Last order date (inclusive)"),
    keyword: Optional[str] = Query(None, description="Customer name, product code or product name"),
    sort_column: Optional[str] = Query(None, description="id, order_date, customer_name or total_amount"),
    sort_direction: Optional[str] = Query(None, description="ascending or descending")
):
    """
    Search order headers

    Unknown sort columns fall back to order_date; anything but
    "ascending" sorts descending.
    """
    try:
        orders = OrderRepository().search(
            start_date=start_date,
            end_date=end_date,
            keyword=keyword,
            sort_column=sort_column,
            sort_direction=sort_direction
        )

        return {
            "status": "success",
            "count": len(orders),
            "data": [order.to_dict() for order in orders]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error searching orders: {str(e)}")


@router.get("/history")
async def get_order_history(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    keyword: Optional[str] = Query(None)
):
    """Orders with their details, newest first"""
    try:
        orders = OrderRepository().find_history(start_date, end_date, keyword)

        return {
            "status": "success",
            "count": len(orders),
            "data": [order.to_dict() for order in orders]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching order history: {str(e)}")


@router.get("/{order_id}")
async def get_order(order_id: int):
    """Get a single order with its details"""
    try:
        order = OrderRepository().find_by_id(order_id)
        if not order:
            raise HTTPException(status_code=404, detail=f"Order {order_id} not found")

        return {"status": "success", "data": order.to_dict()}

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching order: {str(e)}")


@router.post("/", status_code=201)
async def create_order(order: Order):
    """Create an order; the total is computed from the details"""
    try:
        created = OrderRepository().create(order)
        return {"status": "success", "data": created.to_dict()}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error creating order: {str(e)}")


@router.put("/{order_id}")
async def update_order(order_id: int, order: Order):
    """Replace an order and all of its details (409 if the version is stale)"""
    order.id = order_id

    try:
        updated = OrderRepository().update(order)
        return {"status": "success", "data": updated.to_dict()}

    except ConcurrencyConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating order: {str(e)}")


@router.delete("/{order_id}")
async def delete_order(order_id: int, version: int = Query(..., ge=1, description="Version from the last read")):
    try:
        OrderRepository().delete(Order.model_construct(id=order_id, version=version))
        return {"status": "success"}

    except ConcurrencyConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error deleting order: {str(e)}")
