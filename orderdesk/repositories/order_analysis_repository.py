"""
Order Analysis Repository - revenue rollups over the order history

The store does the grouping and summing; the gap-free series and the
top-10-plus-Other folding are done by the helpers in
orderdesk.domain.analytics so every day/week in range is reported even when
no order exists.
"""
import logging
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Dict, List, Optional
from zoneinfo import ZoneInfo

from orderdesk.core.config import settings
from orderdesk.core.database import get_db_connection_dict
from orderdesk.domain.analytics import (
    OTHER_CUSTOMER_ID,
    OTHER_CUSTOMER_NAME,
    OTHER_PRODUCT_CODE,
    OTHER_PRODUCT_NAME,
    CustomerRevenue,
    ProductRevenue,
    RevenuePoint,
    RevenueSummary,
    daily_series,
    fold_top_n,
    week_starts,
    weekly_series,
)

logger = logging.getLogger(__name__)


def report_today() -> date:
    """Today's date in the configured report time zone"""
    return datetime.now(ZoneInfo(settings.REPORT_TIMEZONE)).date()


class OrderAnalysisRepository:
    """
    Repository for revenue reports

    Read-only: no method opens a write transaction.
    """

    @staticmethod
    def _fetch_all(sql: str, params) -> List[dict]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(sql, params)
            return cursor.fetchall()

        finally:
            cursor.close()
            conn.close()

    def _revenue_by_day(self, start_date: date, end_date: date) -> Dict[date, Decimal]:
        rows = self._fetch_all("""
            SELECT order_date, COALESCE(SUM(total_amount), 0) AS revenue
            FROM "order"
            WHERE order_date BETWEEN %s AND %s
            GROUP BY order_date
        """, (start_date, end_date))

        return {row['order_date']: Decimal(row['revenue']) for row in rows}

    def get_daily_revenue(self, start_date: date, end_date: date) -> List[RevenuePoint]:
        """
        Revenue per calendar day, zero-filled

        Args:
            start_date: First day (inclusive)
            end_date: Last day (inclusive)

        Returns:
            One RevenuePoint per day in range, in date order
        """
        if start_date > end_date:
            return []

        totals = self._revenue_by_day(start_date, end_date)
        return daily_series(start_date, end_date, totals)

    def get_weekly_revenue(
        self,
        start_date: date,
        end_date: date,
        today: Optional[date] = None
    ) -> List[RevenuePoint]:
        """
        Revenue per Saturday-starting week, zero-filled

        Week boundaries are aligned to the Saturday that opens the current
        week (computed in REPORT_TIMEZONE unless `today` is given). The first
        bucket is the first such boundary on or after start_date; buckets
        follow every 7 days through end_date.

        Returns:
            One RevenuePoint per week, dated by the week's Saturday
        """
        starts = week_starts(start_date, end_date, today or report_today())
        if not starts:
            return []

        totals = self._revenue_by_day(starts[0], starts[-1] + timedelta(days=6))
        return weekly_series(starts, totals)

    def get_top_customers(self, start_date: date, end_date: date) -> List[CustomerRevenue]:
        """
        Ten highest-grossing customers plus an Other row for the rest

        Other has customer_id -1 and name "Other"; its revenue is 0 when
        there are ten customers or fewer.
        """
        rows = self._fetch_all("""
            SELECT customer_id, customer_name, SUM(total_amount) AS revenue
            FROM "order"
            WHERE order_date BETWEEN %s AND %s
            GROUP BY customer_id, customer_name
            ORDER BY revenue DESC
        """, (start_date, end_date))

        return fold_top_n(
            [CustomerRevenue(**row) for row in rows],
            lambda remainder: CustomerRevenue(
                customer_id=OTHER_CUSTOMER_ID,
                customer_name=OTHER_CUSTOMER_NAME,
                revenue=remainder,
            ),
        )

    def get_top_products(self, start_date: date, end_date: date) -> List[ProductRevenue]:
        """
        Ten highest-grossing products plus an Other row for the rest

        Line revenue is unit_price * quantity over details of orders in range.
        Other has product_code "Other" and an empty product_name.
        """
        rows = self._fetch_all("""
            SELECT d.product_code, d.product_name, SUM(d.unit_price * d.quantity) AS revenue
            FROM "order" o
            JOIN order_detail d ON d.order_id = o.id
            WHERE o.order_date BETWEEN %s AND %s
            GROUP BY d.product_code, d.product_name
            ORDER BY revenue DESC
        """, (start_date, end_date))

        return fold_top_n(
            [ProductRevenue(**row) for row in rows],
            lambda remainder: ProductRevenue(
                product_code=OTHER_PRODUCT_CODE,
                product_name=OTHER_PRODUCT_NAME,
                revenue=remainder,
            ),
        )

    def get_revenue_summary(self, start_date: date, end_date: date) -> RevenueSummary:
        """Order count and grand total over the range"""
        rows = self._fetch_all("""
            SELECT COUNT(*) AS order_count, COALESCE(SUM(total_amount), 0) AS total_revenue
            FROM "order"
            WHERE order_date BETWEEN %s AND %s
        """, (start_date, end_date))

        row = rows[0] if rows else {'order_count': 0, 'total_revenue': 0}
        return RevenueSummary(
            start_date=start_date,
            end_date=end_date,
            order_count=row['order_count'],
            total_revenue=row['total_revenue'],
        )
