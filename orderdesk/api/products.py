"""
Products API Endpoints
Product master maintenance and type-ahead search
"""
from fastapi import APIRouter, HTTPException, Query
from typing import Optional

from orderdesk.core.exceptions import ConcurrencyConflictError
from orderdesk.domain.product import Product
from orderdesk.repositories.product_repository import ProductRepository

router = APIRouter()


@router.get("/")
async def get_products():
    """List all products ordered by code"""
    try:
        products = ProductRepository().find_all()

        return {
            "status": "success",
            "count": len(products),
            "data": [product.to_dict() for product in products]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching products: {str(e)}")


@router.get("/search")
async def search_products(
    q: Optional[str] = Query(None, description="Code or name fragment")
):
    """Type-ahead lookup, at most 10 products"""
    try:
        products = ProductRepository().search(q)

        return {
            "status": "success",
            "count": len(products),
            "data": [product.to_dict() for product in products]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error searching products: {str(e)}")


@router.get("/{code}")
async def get_product(code: str):
    try:
        product = ProductRepository().find_by_code(code)
        if not product:
            raise HTTPException(status_code=404, detail=f"Product {code} not found")

        return {"status": "success", "data": product.to_dict()}

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching product: {str(e)}")


@router.post("/", status_code=201)
async def create_product(product: Product):
    try:
        created = ProductRepository().create(product)
        return {"status": "success", "data": created.to_dict()}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error creating product: {str(e)}")


@router.put("/{code}")
async def update_product(code: str, product: Product):
    """Update a product; the body carries the version from the last read"""
    product.code = code

    try:
        updated = ProductRepository().update(product)
        return {"status": "success", "data": updated.to_dict()}

    except ConcurrencyConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating product: {str(e)}")


@router.delete("/{code}")
async def delete_product(code: str, version: int = Query(..., ge=1, description="Version from the last read")):
    try:
        ProductRepository().delete(Product.model_construct(code=code, version=version))
        return {"status": "success"}

    except ConcurrencyConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error deleting product: {str(e)}")
