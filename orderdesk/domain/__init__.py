"""
Domain Layer - Business Entities

Pydantic models for the entities the repositories read and write, and for
the rows produced by the revenue reports.
"""
from orderdesk.domain.customer import Customer
from orderdesk.domain.product import Product
from orderdesk.domain.order import Order, OrderDetail, OrderSortColumn, SortDirection
from orderdesk.domain.analytics import CustomerRevenue, ProductRevenue, RevenuePoint, RevenueSummary

__all__ = [
    'Customer',
    'Product',
    'Order',
    'OrderDetail',
    'OrderSortColumn',
    'SortDirection',
    'RevenuePoint',
    'CustomerRevenue',
    'ProductRevenue',
    'RevenueSummary',
]
