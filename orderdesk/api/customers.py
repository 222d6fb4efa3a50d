"""
Customers API Endpoints
Customer master maintenance with optimistic concurrency
"""
from fastapi import APIRouter, HTTPException, Query

from orderdesk.core.exceptions import ConcurrencyConflictError
from orderdesk.domain.customer import Customer
from orderdesk.repositories.customer_repository import CustomerRepository

router = APIRouter()


@router.get("/")
async def get_customers():
    """List all customers ordered by name"""
    try:
        customers = CustomerRepository().find_all()

        return {
            "status": "success",
            "count": len(customers),
            "data": [customer.model_dump() for customer in customers]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching customers: {str(e)}")


@router.get("/{customer_id}")
async def get_customer(customer_id: int):
    """Get a single customer"""
    try:
        customer = CustomerRepository().find_by_id(customer_id)
        if not customer:
            raise HTTPException(status_code=404, detail=f"Customer {customer_id} not found")

        return {"status": "success", "data": customer.model_dump()}

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching customer: {str(e)}")


@router.post("/", status_code=201)
async def create_customer(customer: Customer):
    """Create a customer; id and version are assigned here"""
    try:
        created = CustomerRepository().create(customer)
        return {"status": "success", "data": created.model_dump()}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error creating customer: {str(e)}")


@router.put("/{customer_id}")
async def update_customer(customer_id: int, customer: Customer):
    """
    Update a customer

    The body must carry the version from the last read; a stale version
    returns 409 and the caller has to reload.
    """
    customer.id = customer_id

    try:
        updated = CustomerRepository().update(customer)
        return {"status": "success", "data": updated.model_dump()}

    except ConcurrencyConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating customer: {str(e)}")


@router.delete("/{customer_id}")
async def delete_customer(customer_id: int, version: int = Query(..., ge=1, description="Version from the last read")):
    """Delete a customer (409 if the version is stale)"""
    try:
        CustomerRepository().delete(Customer.model_construct(id=customer_id, version=version))
        return {"status": "success"}

    except ConcurrencyConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error deleting customer: {str(e)}")
