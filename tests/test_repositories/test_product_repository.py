"""
Unit tests for ProductRepository

These tests validate repository logic without requiring a database connection.
"""
import logging

import pytest
import psycopg2
from decimal import Decimal
from unittest.mock import patch

from orderdesk.core.exceptions import ConcurrencyConflictError
from orderdesk.domain.product import Product
from orderdesk.repositories.product_repository import ProductRepository, SEARCH_LIMIT


def _product_row(code, name, price="100.00", version=1):
    return {'code': code, 'name': name, 'unit_price': Decimal(price), 'notes': None, 'version': version}


class TestProductRepository:
    """Test ProductRepository methods"""

    @patch('orderdesk.repositories.product_repository.get_db_connection_dict')
    def test_find_by_code_returns_product(self, mock_get_conn, mock_conn, mock_cursor):
        mock_get_conn.return_value = mock_conn
        mock_cursor.fetchone.return_value = _product_row('A-100', 'Green Tea', '120.50', version=3)

        product = ProductRepository().find_by_code('A-100')

        assert isinstance(product, Product)
        assert product.unit_price == Decimal('120.50')
        assert product.version == 3
        assert mock_cursor.execute.call_args[0][1] == ('A-100',)
        mock_cursor.close.assert_called_once()
        mock_conn.close.assert_called_once()

    @pytest.mark.parametrize("code", [None, "", "   "])
    @patch('orderdesk.repositories.product_repository.get_db_connection_dict')
    def test_find_by_code_without_code_does_not_query(self, mock_get_conn, code):
        assert ProductRepository().find_by_code(code) is None
        mock_get_conn.assert_not_called()

    @patch('orderdesk.repositories.product_repository.get_db_connection_dict')
    def test_find_all_orders_by_code(self, mock_get_conn, mock_conn, mock_cursor):
        mock_get_conn.return_value = mock_conn
        mock_cursor.fetchall.return_value = [_product_row('A-100', 'Green Tea'), _product_row('B-200', 'Rice Cracker')]

        products = ProductRepository().find_all()

        assert [p.code for p in products] == ['A-100', 'B-200']
        assert "ORDER BY code" in mock_cursor.execute.call_args[0][0]

    @patch('orderdesk.repositories.product_repository.get_db_connection_dict')
    def test_search_matches_code_or_name_with_limit(self, mock_get_conn, mock_conn, mock_cursor):
        """Test search uses a case-insensitive substring and caps the result size"""
        mock_get_conn.return_value = mock_conn
        mock_cursor.fetchall.return_value = [_product_row('A-100', 'Green Tea')]

        products = ProductRepository().search('  tea ')

        assert len(products) == 1
        sql, params = mock_cursor.execute.call_args[0]
        assert "code ILIKE %s OR name ILIKE %s" in sql
        assert "ORDER BY code" in sql
        assert "LIMIT %s" in sql
        assert params == ('%tea%', '%tea%', SEARCH_LIMIT)
        assert SEARCH_LIMIT == 10

    @patch('orderdesk.repositories.product_repository.get_db_connection_dict')
    def test_search_escapes_like_wildcards(self, mock_get_conn, mock_conn, mock_cursor):
        mock_get_conn.return_value = mock_conn
        mock_cursor.fetchall.return_value = []

        ProductRepository().search('50%_off')

        params = mock_cursor.execute.call_args[0][1]
        assert params[0] == '%50\\%\\_off%'

    @patch('orderdesk.repositories.product_repository.get_db_connection_dict')
    def test_create_sets_version_one(self, mock_get_conn, mock_conn, mock_cursor):
        mock_get_conn.return_value = mock_conn

        product = Product(code='C-300', name='Miso', unit_price=Decimal('450'), version=9)
        created = ProductRepository().create(product)

        assert created.version == 1
        assert mock_cursor.execute.call_args[0][1] == ('C-300', 'Miso', Decimal('450'), None, 1)
        mock_conn.commit.assert_called_once()

    @patch('orderdesk.repositories.product_repository.get_db_connection_dict')
    def test_create_duplicate_code_rolls_back(self, mock_get_conn, mock_conn, mock_cursor):
        mock_get_conn.return_value = mock_conn
        mock_cursor.execute.side_effect = psycopg2.IntegrityError("duplicate key value")

        with pytest.raises(psycopg2.IntegrityError):
            ProductRepository().create(Product(code='A-100', name='Dup'))

        mock_conn.rollback.assert_called_once()
        mock_conn.commit.assert_not_called()
        mock_conn.close.assert_called_once()

    @patch('orderdesk.repositories.product_repository.get_db_connection_dict')
    def test_update_increments_version(self, mock_get_conn, mock_conn, mock_cursor):
        mock_get_conn.return_value = mock_conn

        product = Product(code='A-100', name='Green Tea', unit_price=Decimal('130'), version=2)
        updated = ProductRepository().update(product)

        assert updated.version == 3
        sql, params = mock_cursor.execute.call_args[0]
        assert "WHERE code = %s" in sql
        assert params[-2:] == ('A-100', 2)

    @patch('orderdesk.repositories.product_repository.get_db_connection_dict')
    def test_update_with_stale_version_raises_conflict(self, mock_get_conn, mock_conn, mock_cursor):
        mock_get_conn.return_value = mock_conn
        mock_cursor.rowcount = 0

        product = Product(code='A-100', name='Green Tea', version=2)
        with pytest.raises(ConcurrencyConflictError) as exc_info:
            ProductRepository().update(product)

        assert exc_info.value.key == 'A-100'
        assert product.version == 2
        mock_conn.rollback.assert_called_once()
        mock_conn.commit.assert_not_called()

    @patch('orderdesk.repositories.product_repository.get_db_connection_dict')
    def test_delete_with_stale_version_raises_conflict(self, mock_get_conn, mock_conn, mock_cursor):
        mock_get_conn.return_value = mock_conn
        mock_cursor.rowcount = 0

        with pytest.raises(ConcurrencyConflictError):
            ProductRepository().delete(Product(code='A-100', name='Green Tea', version=1))

        mock_conn.rollback.assert_called_once()

    @patch('orderdesk.repositories.product_repository.get_db_connection_dict')
    def test_find_by_code_reads_negative_price(self, mock_get_conn, mock_conn, mock_cursor):
        """Test a stored discount item with a negative price reads back unchanged"""
        mock_get_conn.return_value = mock_conn
        mock_cursor.fetchone.return_value = _product_row('DISC', 'Discount', '-20.00')

        product = ProductRepository().find_by_code('DISC')

        assert product.unit_price == Decimal('-20.00')

    @patch('orderdesk.repositories.product_repository.get_db_connection_dict')
    def test_delete_store_failure_logs_error(self, mock_get_conn, mock_conn, mock_cursor, caplog):
        mock_get_conn.return_value = mock_conn
        mock_cursor.execute.side_effect = psycopg2.OperationalError("server closed the connection")

        with caplog.at_level(logging.ERROR, logger='orderdesk.repositories.product_repository'):
            with pytest.raises(psycopg2.OperationalError):
                ProductRepository().delete(Product(code='A-100', name='Green Tea', version=1))

        assert "Rolled back product delete for A-100" in caplog.text
        mock_conn.rollback.assert_called_once()
        mock_conn.commit.assert_not_called()
