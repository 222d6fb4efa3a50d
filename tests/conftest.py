"""
Pytest fixtures and configuration for orderdesk tests

Repositories are exercised against MagicMock connections, so no database
is needed. Patch the repository module's get_db_connection_dict and hand it
`mock_conn`.
"""
import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

from orderdesk.domain.order import Order, OrderDetail


@pytest.fixture
def mock_conn():
    """
    Connection mock whose cursor() always returns the same cursor

    rowcount defaults to 1 so guarded writes succeed unless a test says otherwise.
    """
    conn = MagicMock()
    cursor = MagicMock()
    cursor.rowcount = 1
    conn.cursor.return_value = cursor
    return conn


@pytest.fixture
def mock_cursor(mock_conn):
    return mock_conn.cursor.return_value


@pytest.fixture
def sample_order():
    """Order with two real lines and one blank row"""
    return Order(
        order_date=date(2024, 1, 3),
        customer_id=5,
        customer_name="Sakura Trading",
        total_amount=Decimal("999999"),
        notes="rush",
        details=[
            OrderDetail(product_code="A-100", product_name="Green Tea", unit_price=Decimal("120.50"), quantity=2),
            OrderDetail(product_code="   ", product_name="", unit_price=Decimal("10"), quantity=9),
            OrderDetail(product_code="B-200", product_name="Rice Cracker", unit_price=Decimal("80"), quantity=3),
        ]
    )
