"""
Order Repository - Data Access Layer for Orders

An order and its detail lines are read and written as one unit:
- reads join header and details in a single round trip
- create/update/delete run every statement in one transaction and either
  all land or none do
- details are replaced wholesale on update (delete all, reinsert all)

Also hosts order search: date range + keyword across header and details,
with a whitelisted sort.
"""
import logging
from datetime import date
from typing import Dict, List, Optional

from orderdesk.domain.order import Order, OrderDetail, OrderSortColumn, SortDirection
from orderdesk.core.database import get_db_connection_dict
from orderdesk.core.exceptions import ConcurrencyConflictError
from orderdesk.repositories.base import execute_guarded, like_pattern, normalize_keyword

logger = logging.getLogger(__name__)

HISTORY_START = date(1900, 1, 1)
HISTORY_END = date(2999, 12, 31)

# Only these fragments ever reach the ORDER BY clause
SORT_COLUMNS = {
    OrderSortColumn.ID: "o.id",
    OrderSortColumn.ORDER_DATE: "o.order_date",
    OrderSortColumn.CUSTOMER_NAME: "o.customer_name",
    OrderSortColumn.TOTAL_AMOUNT: "o.total_amount",
}

HEADER_COLUMNS = ('id', 'order_date', 'customer_id', 'customer_name', 'total_amount', 'notes', 'version')
DETAIL_COLUMNS = ('detail_id', 'product_code', 'product_name', 'unit_price', 'quantity')

# Detail columns carry no order_id: the owning header id is stamped back on
# each detail after the rows are split.
JOINED_SELECT = """
    SELECT
        o.id, o.order_date, o.customer_id, o.customer_name,
        o.total_amount, o.notes, o.version,
        d.detail_id, d.product_code, d.product_name, d.unit_price, d.quantity
    FROM "order" o
    LEFT JOIN order_detail d ON d.order_id = o.id
"""

KEYWORD_FILTER = """(
    %(is_empty)s
    OR o.customer_name ILIKE %(pattern)s
    OR EXISTS (
        SELECT 1 FROM order_detail m
        WHERE m.order_id = o.id
          AND (m.product_code ILIKE %(pattern)s OR m.product_name ILIKE %(pattern)s)
    )
)"""


class OrderRepository:
    """
    Repository for Order aggregate data access

    All SQL queries for orders and order details are centralized here.
    Returns Order domain models; header listings come back without details.
    """

    @staticmethod
    def _map_joined_rows(rows: List[dict]) -> List[Order]:
        """
        Fold header+detail join rows into Order models

        Rows keep their query order. A header without details (all detail
        columns NULL from the LEFT JOIN) yields an order with no lines.
        """
        orders: Dict[int, Order] = {}

        for row in rows:
            order = orders.get(row['id'])
            if order is None:
                order = Order(**{column: row[column] for column in HEADER_COLUMNS})
                orders[order.id] = order

            if row.get('detail_id') is None:
                continue

            detail = OrderDetail(**{column: row[column] for column in DETAIL_COLUMNS})
            detail.order_id = order.id
            order.details.append(detail)

        return list(orders.values())

    @staticmethod
    def _insert_details(cursor, details: List[OrderDetail]) -> None:
        for detail in details:
            cursor.execute("""
                INSERT INTO order_detail (order_id, product_code, product_name, unit_price, quantity)
                VALUES (%s, %s, %s, %s, %s)
                RETURNING detail_id
            """, (detail.order_id, detail.product_code, detail.product_name, detail.unit_price, detail.quantity))
            detail.detail_id = cursor.fetchone()['detail_id']

    def find_by_id(self, order_id: Optional[int]) -> Optional[Order]:
        """
        Find order by ID with all of its details

        Args:
            order_id: Order ID (None returns None without querying)

        Returns:
            Order with details, or None if not found
        """
        if order_id is None:
            return None

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(JOINED_SELECT + """
                WHERE o.id = %s
                ORDER BY d.detail_id
            """, (order_id,))

            orders = self._map_joined_rows(cursor.fetchall())
            return orders[0] if orders else None

        finally:
            cursor.close()
            conn.close()

    def find_all(self) -> List[Order]:
        """
        Every order header, for list views

        Returns:
            Orders without details, ordered by date, customer name, id
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT id, order_date, customer_id, customer_name, total_amount, notes, version
                FROM "order"
                ORDER BY order_date, customer_name, id
            """)

            return [Order(**row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def search(
        self,
        start_date: date,
        end_date: date,
        keyword: Optional[str] = None,
        sort_column: Optional[str] = None,
        sort_direction: Optional[str] = None
    ) -> List[Order]:
        """
        Find order headers by date range and keyword

        Args:
            start_date: First order date (inclusive)
            end_date: Last order date (inclusive)
            keyword: Matched case-insensitively against customer name and
                against product code/name of any detail; blank matches all
            sort_column: id, order_date, customer_name or total_amount;
                anything else sorts by order_date
            sort_direction: "ascending" sorts ascending; anything else descending

        Returns:
            Orders without details
        """
        column = OrderSortColumn.resolve(sort_column)
        direction = SortDirection.resolve(sort_direction)
        key = normalize_keyword(keyword)

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT o.id, o.order_date, o.customer_id, o.customer_name,
                       o.total_amount, o.notes, o.version
                FROM "order" o
                WHERE o.order_date BETWEEN %(start_date)s AND %(end_date)s
                  AND {KEYWORD_FILTER}
                ORDER BY {SORT_COLUMNS[column]} {direction.value}, o.id
            """, {
                'start_date': start_date,
                'end_date': end_date,
                'is_empty': not key,
                'pattern': like_pattern(key),
            })

            return [Order(**row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def find_history(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        keyword: Optional[str] = None
    ) -> List[Order]:
        """
        Orders with their full detail lists, newest first

        Same keyword semantics as search(). Missing dates mean an unbounded
        range. The sort is fixed: order date descending, then id descending.
        """
        key = normalize_keyword(keyword)

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(JOINED_SELECT + f"""
                WHERE o.order_date BETWEEN %(start_date)s AND %(end_date)s
                  AND {KEYWORD_FILTER}
                ORDER BY o.order_date DESC, o.id DESC, d.detail_id
            """, {
                'start_date': start_date or HISTORY_START,
                'end_date': end_date or HISTORY_END,
                'is_empty': not key,
                'pattern': like_pattern(key),
            })

            orders = self._map_joined_rows(cursor.fetchall())
            orders.sort(key=lambda order: (order.order_date, order.id), reverse=True)
            return orders

        finally:
            cursor.close()
            conn.close()

    def create(self, order: Order) -> Order:
        """
        Insert an order and its details in one transaction

        The total is recomputed from the non-blank details; blank rows are
        skipped and dropped from the returned order.

        Returns:
            The same order with id, version 1, total and detail ids set
        """
        details = order.persistable_details()
        original_id, original_version = order.id, order.version
        order.version = 1
        order.total_amount = order.compute_total()

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                INSERT INTO "order" (order_date, customer_id, customer_name, total_amount, notes, version)
                VALUES (%s, %s, %s, %s, %s, %s)
                RETURNING id
            """, (order.order_date, order.customer_id, order.customer_name,
                  order.total_amount, order.notes, order.version))

            order.id = cursor.fetchone()['id']
            order.stamp_order_id()
            self._insert_details(cursor, details)

            conn.commit()
            order.details = details

            logger.info(f"Created order {order.id} with {len(details)} details, total {order.total_amount}")
            return order

        except Exception as e:
            conn.rollback()
            # Nothing was stored: drop the ids handed out inside the transaction
            order.id, order.version = original_id, original_version
            for detail in order.details:
                detail.order_id = original_id
                detail.detail_id = None
            logger.error(f"Rolled back order insert: {e}")
            raise

        finally:
            cursor.close()
            conn.close()

    def update(self, order: Order) -> Order:
        """
        Replace an order header and its whole detail list in one transaction

        The header update is guarded by id and version; when it matches
        nothing the transaction is rolled back before any detail is touched.
        Otherwise every stored detail is deleted and the non-blank details
        of `order` are inserted.

        Returns:
            The same order with version incremented and detail ids set

        Raises:
            ConcurrencyConflictError: If the stored version no longer matches
        """
        details = order.persistable_details()
        order.total_amount = order.compute_total()

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            execute_guarded(cursor, """
                UPDATE "order" SET
                    order_date = %s,
                    customer_id = %s,
                    customer_name = %s,
                    total_amount = %s,
                    notes = %s,
                    version = version + 1
                WHERE id = %s
                  AND version = %s
            """, (order.order_date, order.customer_id, order.customer_name, order.total_amount,
                  order.notes, order.id, order.version),
                entity="order", key=order.id, version=order.version)

            cursor.execute("DELETE FROM order_detail WHERE order_id = %s", (order.id,))
            order.stamp_order_id()
            self._insert_details(cursor, details)

            conn.commit()
            order.version += 1
            order.details = details

            logger.info(f"Updated order {order.id} to version {order.version}")
            return order

        except ConcurrencyConflictError:
            conn.rollback()
            raise

        except Exception as e:
            conn.rollback()
            logger.error(f"Rolled back order update for {order.id}: {e}")
            raise

        finally:
            cursor.close()
            conn.close()

    def delete(self, order: Order) -> None:
        """
        Delete an order and its details in one transaction

        Details go first; if the guarded header delete then matches nothing
        the rollback restores them too.

        Raises:
            ConcurrencyConflictError: If the stored version no longer matches
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("DELETE FROM order_detail WHERE order_id = %s", (order.id,))

            execute_guarded(cursor, """
                DELETE FROM "order"
                WHERE id = %s
                  AND version = %s
            """, (order.id, order.version),
                entity="order", key=order.id, version=order.version)

            conn.commit()
            logger.info(f"Deleted order {order.id}")

        except ConcurrencyConflictError:
            conn.rollback()
            raise

        except Exception as e:
            conn.rollback()
            logger.error(f"Rolled back order delete for {order.id}: {e}")
            raise

        finally:
            cursor.close()
            conn.close()
