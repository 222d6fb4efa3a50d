"""
Customer Repository - Data Access Layer for Customers

Version-checked CRUD over the customer table. Every call opens its own
connection and closes it on exit; writes commit or roll back explicitly.
"""
import logging
from typing import List, Optional

from orderdesk.domain.customer import Customer
from orderdesk.core.database import get_db_connection_dict
from orderdesk.core.exceptions import ConcurrencyConflictError
from orderdesk.repositories.base import execute_guarded

logger = logging.getLogger(__name__)


class CustomerRepository:
    """
    Repository for Customer data access

    All SQL queries for customers are centralized here.
    Returns Customer domain models, not raw dictionaries.
    """

    def find_all(self) -> List[Customer]:
        """
        List every customer

        Returns:
            Customers ordered by name
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT id, name, phone, notes, version
                FROM customer
                ORDER BY name
            """)

            rows = cursor.fetchall()
            return [Customer(**row) for row in rows]

        finally:
            cursor.close()
            conn.close()

    def find_by_id(self, customer_id: Optional[int]) -> Optional[Customer]:
        """
        Find customer by ID

        Args:
            customer_id: Customer ID (None returns None without querying)

        Returns:
            Customer or None if not found
        """
        if customer_id is None:
            return None

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT id, name, phone, notes, version
                FROM customer
                WHERE id = %s
            """, (customer_id,))

            row = cursor.fetchone()
            if not row:
                return None

            return Customer(**row)

        finally:
            cursor.close()
            conn.close()

    def create(self, customer: Customer) -> Customer:
        """
        Insert a new customer with version 1

        Args:
            customer: Customer to insert; id is ignored and replaced

        Returns:
            The same customer with the store-assigned id
        """
        customer.version = 1

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                INSERT INTO customer (name, phone, notes, version)
                VALUES (%s, %s, %s, %s)
                RETURNING id
            """, (customer.name, customer.phone, customer.notes, customer.version))

            customer.id = cursor.fetchone()['id']
            conn.commit()

            logger.info(f"Created customer {customer.id}")
            return customer

        except Exception as e:
            conn.rollback()
            logger.error(f"Rolled back customer insert: {e}")
            raise

        finally:
            cursor.close()
            conn.close()

    def update(self, customer: Customer) -> Customer:
        """
        Update a customer if nobody changed it since it was read

        Args:
            customer: Customer carrying the id and version from a prior read

        Returns:
            The same customer with its version incremented

        Raises:
            ConcurrencyConflictError: If the stored version no longer matches
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            execute_guarded(cursor, """
                UPDATE customer SET
                    name = %s,
                    phone = %s,
                    notes = %s,
                    version = version + 1
                WHERE id = %s
                  AND version = %s
            """, (customer.name, customer.phone, customer.notes, customer.id, customer.version),
                entity="customer", key=customer.id, version=customer.version)

            conn.commit()
            customer.version += 1

            logger.info(f"Updated customer {customer.id} to version {customer.version}")
            return customer

        except ConcurrencyConflictError:
            conn.rollback()
            raise

        except Exception as e:
            conn.rollback()
            logger.error(f"Rolled back customer update for {customer.id}: {e}")
            raise

        finally:
            cursor.close()
            conn.close()

    def delete(self, customer: Customer) -> None:
        """
        Delete a customer if nobody changed it since it was read

        Raises:
            ConcurrencyConflictError: If the stored version no longer matches
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            execute_guarded(cursor, """
                DELETE FROM customer
                WHERE id = %s
                  AND version = %s
            """, (customer.id, customer.version),
                entity="customer", key=customer.id, version=customer.version)

            conn.commit()
            logger.info(f"Deleted customer {customer.id}")

        except ConcurrencyConflictError:
            conn.rollback()
            raise

        except Exception as e:
            conn.rollback()
            logger.error(f"Rolled back customer delete for {customer.id}: {e}")
            raise

        finally:
            cursor.close()
            conn.close()
