"""
Repository Layer - Data Access

This layer handles all database queries and returns domain models.
Repositories abstract away SQL details from callers.
"""
from orderdesk.repositories.customer_repository import CustomerRepository
from orderdesk.repositories.product_repository import ProductRepository
from orderdesk.repositories.order_repository import OrderRepository
from orderdesk.repositories.order_analysis_repository import OrderAnalysisRepository

__all__ = [
    'CustomerRepository',
    'ProductRepository',
    'OrderRepository',
    'OrderAnalysisRepository'
]
