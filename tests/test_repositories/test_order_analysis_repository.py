"""
Unit tests for OrderAnalysisRepository

The store's GROUP BY results are mocked; the tests check the zero-filled
series and the top-10-plus-Other folding built on top of them.
"""
from datetime import date, timedelta
from decimal import Decimal
from unittest.mock import patch

from orderdesk.domain.analytics import OTHER_CUSTOMER_ID, OTHER_PRODUCT_CODE, sunday_weekday, SATURDAY
from orderdesk.repositories.order_analysis_repository import OrderAnalysisRepository

PATCH_TARGET = 'orderdesk.repositories.order_analysis_repository.get_db_connection_dict'


class TestDailyRevenue:

    @patch(PATCH_TARGET)
    def test_daily_series_is_zero_filled(self, mock_get_conn, mock_conn, mock_cursor):
        """Test one 100 order on 01-03 gives five rows [0, 0, 100, 0, 0]"""
        mock_get_conn.return_value = mock_conn
        mock_cursor.fetchall.return_value = [{'order_date': date(2024, 1, 3), 'revenue': Decimal('100')}]

        points = OrderAnalysisRepository().get_daily_revenue(date(2024, 1, 1), date(2024, 1, 5))

        assert [p.date for p in points] == [date(2024, 1, d) for d in range(1, 6)]
        assert [p.revenue for p in points] == [0, 0, 100, 0, 0]
        assert mock_cursor.execute.call_args[0][1] == (date(2024, 1, 1), date(2024, 1, 5))
        mock_conn.commit.assert_not_called()
        mock_conn.close.assert_called_once()

    @patch(PATCH_TARGET)
    def test_daily_series_without_orders(self, mock_get_conn, mock_conn, mock_cursor):
        mock_get_conn.return_value = mock_conn
        mock_cursor.fetchall.return_value = []

        points = OrderAnalysisRepository().get_daily_revenue(date(2024, 2, 27), date(2024, 3, 1))

        assert len(points) == 4  # leap year
        assert all(p.revenue == 0 for p in points)

    @patch(PATCH_TARGET)
    def test_inverted_range_is_empty_without_query(self, mock_get_conn):
        assert OrderAnalysisRepository().get_daily_revenue(date(2024, 1, 5), date(2024, 1, 1)) == []
        mock_get_conn.assert_not_called()


class TestWeeklyRevenue:

    @patch(PATCH_TARGET)
    def test_first_bucket_is_saturday_whatever_today_is(self, mock_get_conn, mock_conn, mock_cursor):
        mock_get_conn.return_value = mock_conn
        mock_cursor.fetchall.return_value = []
        repo = OrderAnalysisRepository()

        for today_offset in range(7):
            today = date(2024, 3, 10) + timedelta(days=today_offset)
            for start_offset in range(7):
                start = date(2024, 1, 1) + timedelta(days=start_offset)
                points = repo.get_weekly_revenue(start, date(2024, 2, 29), today=today)

                assert sunday_weekday(points[0].date) == SATURDAY
                assert start <= points[0].date < start + timedelta(days=7)
                assert all(b.date - a.date == timedelta(days=7) for a, b in zip(points, points[1:]))
                assert points[-1].date <= date(2024, 2, 29)

    @patch(PATCH_TARGET)
    def test_weekly_buckets_sum_half_open_weeks(self, mock_get_conn, mock_conn, mock_cursor):
        mock_get_conn.return_value = mock_conn
        # 2024-01-06 and 2024-01-13 are Saturdays
        mock_cursor.fetchall.return_value = [
            {'order_date': date(2024, 1, 6), 'revenue': Decimal('10')},
            {'order_date': date(2024, 1, 12), 'revenue': Decimal('5')},
            {'order_date': date(2024, 1, 13), 'revenue': Decimal('7')},
        ]

        points = OrderAnalysisRepository().get_weekly_revenue(
            date(2024, 1, 1), date(2024, 1, 31), today=date(2024, 3, 15)
        )

        assert [p.date for p in points] == [date(2024, 1, 6), date(2024, 1, 13), date(2024, 1, 20), date(2024, 1, 27)]
        assert [p.revenue for p in points] == [15, 7, 0, 0]
        # Daily totals are fetched for the whole span of the buckets
        assert mock_cursor.execute.call_args[0][1] == (date(2024, 1, 6), date(2024, 2, 2))

    @patch(PATCH_TARGET)
    @patch('orderdesk.repositories.order_analysis_repository.report_today')
    def test_today_defaults_to_report_timezone(self, mock_today, mock_get_conn, mock_conn, mock_cursor):
        mock_get_conn.return_value = mock_conn
        mock_cursor.fetchall.return_value = []
        mock_today.return_value = date(2024, 3, 15)

        points = OrderAnalysisRepository().get_weekly_revenue(date(2024, 1, 1), date(2024, 1, 31))

        mock_today.assert_called_once()
        assert points[0].date == date(2024, 1, 6)


class TestTopRankings:

    @patch(PATCH_TARGET)
    def test_top_customers_other_is_grand_total_minus_top_ten(self, mock_get_conn, mock_conn, mock_cursor):
        mock_get_conn.return_value = mock_conn
        rows = [
            {'customer_id': i, 'customer_name': f'Customer {i}', 'revenue': Decimal(1000 - i * 37) + Decimal('0.25')}
            for i in range(1, 16)
        ]
        mock_cursor.fetchall.return_value = rows
        grand_total = sum(r['revenue'] for r in rows)

        result = OrderAnalysisRepository().get_top_customers(date(2024, 1, 1), date(2024, 1, 31))

        assert len(result) == 11
        other = [r for r in result if r.customer_id == OTHER_CUSTOMER_ID]
        assert len(other) == 1
        assert other[0].customer_name == 'Other'
        top = [r for r in result if r.customer_id != OTHER_CUSTOMER_ID]
        assert [r.customer_id for r in top] == list(range(1, 11))
        assert sum(r.revenue for r in top) + other[0].revenue == grand_total
        assert [r.revenue for r in result] == sorted((r.revenue for r in result), reverse=True)

    @patch(PATCH_TARGET)
    def test_top_customers_with_few_customers_has_zero_other(self, mock_get_conn, mock_conn, mock_cursor):
        mock_get_conn.return_value = mock_conn
        mock_cursor.fetchall.return_value = [
            {'customer_id': 1, 'customer_name': 'Aoki', 'revenue': Decimal('300')},
            {'customer_id': 2, 'customer_name': 'Kato', 'revenue': Decimal('500')},
        ]

        result = OrderAnalysisRepository().get_top_customers(date(2024, 1, 1), date(2024, 1, 31))

        assert [r.customer_id for r in result] == [2, 1, OTHER_CUSTOMER_ID]
        assert result[-1].revenue == 0

    @patch(PATCH_TARGET)
    def test_top_products_use_line_revenue_and_product_sentinel(self, mock_get_conn, mock_conn, mock_cursor):
        mock_get_conn.return_value = mock_conn
        rows = [
            {'product_code': f'P-{i:03d}', 'product_name': f'Product {i}', 'revenue': Decimal(100 * (13 - i))}
            for i in range(1, 13)
        ]
        mock_cursor.fetchall.return_value = rows

        result = OrderAnalysisRepository().get_top_products(date(2024, 1, 1), date(2024, 1, 31))

        sql = mock_cursor.execute.call_args[0][0]
        assert "SUM(d.unit_price * d.quantity)" in sql
        assert "JOIN order_detail d" in sql

        other = [r for r in result if r.product_code == OTHER_PRODUCT_CODE]
        assert len(other) == 1
        assert other[0].product_name == ''
        # Products 11 and 12 fold into Other: 200 + 100
        assert other[0].revenue == Decimal('300')
        assert sum(r.revenue for r in result) == sum(r['revenue'] for r in rows)

    @patch(PATCH_TARGET)
    def test_empty_range_still_reports_other(self, mock_get_conn, mock_conn, mock_cursor):
        mock_get_conn.return_value = mock_conn
        mock_cursor.fetchall.return_value = []

        result = OrderAnalysisRepository().get_top_products(date(2024, 1, 1), date(2024, 1, 31))

        assert len(result) == 1
        assert result[0].is_other
        assert result[0].revenue == 0


@patch(PATCH_TARGET)
def test_revenue_summary(mock_get_conn, mock_conn, mock_cursor):
    mock_get_conn.return_value = mock_conn
    mock_cursor.fetchall.return_value = [{'order_count': 3, 'total_revenue': Decimal('1234.50')}]

    summary = OrderAnalysisRepository().get_revenue_summary(date(2024, 1, 1), date(2024, 1, 31))

    assert summary.order_count == 3
    assert summary.total_revenue == Decimal('1234.50')
