"""
Product Repository - Data Access Layer for Products

Handles all database queries for the product master and returns Product
domain models. Products are keyed by their code.
"""
import logging
from typing import List, Optional

from orderdesk.domain.product import Product
from orderdesk.core.database import get_db_connection_dict
from orderdesk.core.exceptions import ConcurrencyConflictError
from orderdesk.repositories.base import execute_guarded, like_pattern, normalize_keyword

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 10


class ProductRepository:
    """
    Repository for Product data access

    All SQL queries for products are centralized here.
    Returns Product domain models, not raw dictionaries.
    """

    def find_all(self) -> List[Product]:
        """
        List every product

        Returns:
            Products ordered by code
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT code, name, unit_price, notes, version
                FROM product
                ORDER BY code
            """)

            rows = cursor.fetchall()
            return [Product(**row) for row in rows]

        finally:
            cursor.close()
            conn.close()

    def search(self, keyword: Optional[str]) -> List[Product]:
        """
        Type-ahead lookup by code or name

        Args:
            keyword: Case-insensitive substring of code or name (blank matches all)

        Returns:
            At most SEARCH_LIMIT products ordered by code
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            pattern = like_pattern(normalize_keyword(keyword))
            cursor.execute("""
                SELECT code, name, unit_price, notes, version
                FROM product
                WHERE (code ILIKE %s OR name ILIKE %s)
                ORDER BY code
                LIMIT %s
            """, (pattern, pattern, SEARCH_LIMIT))

            rows = cursor.fetchall()
            return [Product(**row) for row in rows]

        finally:
            cursor.close()
            conn.close()

    def find_by_code(self, code: Optional[str]) -> Optional[Product]:
        """
        Find product by code

        Args:
            code: Product code (None or blank returns None without querying)

        Returns:
            Product or None if not found
        """
        if code is None or not code.strip():
            return None

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT code, name, unit_price, notes, version
                FROM product
                WHERE code = %s
            """, (code,))

            row = cursor.fetchone()
            if not row:
                return None

            return Product(**row)

        finally:
            cursor.close()
            conn.close()

    def create(self, product: Product) -> Product:
        """
        Insert a new product with version 1

        The code is supplied by the caller; a duplicate code surfaces as the
        driver's IntegrityError after rollback.
        """
        product.version = 1

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                INSERT INTO product (code, name, unit_price, notes, version)
                VALUES (%s, %s, %s, %s, %s)
            """, (product.code, product.name, product.unit_price, product.notes, product.version))

            conn.commit()
            logger.info(f"Created product {product.code}")
            return product

        except Exception as e:
            conn.rollback()
            logger.error(f"Rolled back product insert for {product.code}: {e}")
            raise

        finally:
            cursor.close()
            conn.close()

    def update(self, product: Product) -> Product:
        """
        Update a product if nobody changed it since it was read

        Raises:
            ConcurrencyConflictError: If the stored version no longer matches
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            execute_guarded(cursor, """
                UPDATE product SET
                    name = %s,
                    unit_price = %s,
                    notes = %s,
                    version = version + 1
                WHERE code = %s
                  AND version = %s
            """, (product.name, product.unit_price, product.notes, product.code, product.version),
                entity="product", key=product.code, version=product.version)

            conn.commit()
            product.version += 1

            logger.info(f"Updated product {product.code} to version {product.version}")
            return product

        except ConcurrencyConflictError:
            conn.rollback()
            raise

        except Exception as e:
            conn.rollback()
            logger.error(f"Rolled back product update for {product.code}: {e}")
            raise

        finally:
            cursor.close()
            conn.close()

    def delete(self, product: Product) -> None:
        """
        Delete a product if nobody changed it since it was read

        Raises:
            ConcurrencyConflictError: If the stored version no longer matches
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            execute_guarded(cursor, """
                DELETE FROM product
                WHERE code = %s
                  AND version = %s
            """, (product.code, product.version),
                entity="product", key=product.code, version=product.version)

            conn.commit()
            logger.info(f"Deleted product {product.code}")

        except ConcurrencyConflictError:
            conn.rollback()
            raise

        except Exception as e:
            conn.rollback()
            logger.error(f"Rolled back product delete for {product.code}: {e}")
            raise

        finally:
            cursor.close()
            conn.close()
