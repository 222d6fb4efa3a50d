"""
Revenue Report Models and Rollup Helpers

Report rows returned by OrderAnalysisRepository, plus the pure functions
that turn store aggregates into gap-free series and top-N-plus-Other
rankings. Kept free of SQL so they can be tested directly.
"""
from pydantic import BaseModel, Field
from typing import Callable, Dict, Iterable, List, Optional, TypeVar
from datetime import date, timedelta
from decimal import Decimal

TOP_N = 10
OTHER_CUSTOMER_ID = -1
OTHER_CUSTOMER_NAME = "Other"
OTHER_PRODUCT_CODE = "Other"
OTHER_PRODUCT_NAME = ""

# Sunday=0 .. Saturday=6
SATURDAY = 6


class RevenuePoint(BaseModel):
    """One bucket of a daily or weekly series (date = first day of the bucket)"""

    date: date
    revenue: Decimal = Field(Decimal("0"))

    def to_dict(self) -> dict:
        return {'date': self.date.isoformat(), 'revenue': float(self.revenue)}


class CustomerRevenue(BaseModel):
    customer_id: Optional[int] = None
    customer_name: Optional[str] = None
    revenue: Decimal = Field(Decimal("0"))

    @property
    def is_other(self) -> bool:
        return self.customer_id == OTHER_CUSTOMER_ID

    def to_dict(self) -> dict:
        return {
            'customer_id': self.customer_id,
            'customer_name': self.customer_name,
            'revenue': float(self.revenue),
        }


class ProductRevenue(BaseModel):
    product_code: Optional[str] = None
    product_name: Optional[str] = None
    revenue: Decimal = Field(Decimal("0"))

    @property
    def is_other(self) -> bool:
        return self.product_code == OTHER_PRODUCT_CODE and self.product_name == OTHER_PRODUCT_NAME

    def to_dict(self) -> dict:
        return {
            'product_code': self.product_code,
            'product_name': self.product_name,
            'revenue': float(self.revenue),
        }


class RevenueSummary(BaseModel):
    start_date: date
    end_date: date
    order_count: int = 0
    total_revenue: Decimal = Field(Decimal("0"))

    def to_dict(self) -> dict:
        return {
            'start_date': self.start_date.isoformat(),
            'end_date': self.end_date.isoformat(),
            'order_count': self.order_count,
            'total_revenue': float(self.total_revenue),
        }


def sunday_weekday(day: date) -> int:
    """Weekday numbered Sunday=0 .. Saturday=6"""
    return (day.weekday() + 1) % 7


def daily_series(start_date: date, end_date: date, totals: Dict[date, Decimal]) -> List[RevenuePoint]:
    """
    One point per calendar day in [start_date, end_date], zero-filled

    Args:
        start_date: First day (inclusive)
        end_date: Last day (inclusive)
        totals: Revenue per day; days missing here get 0

    Returns:
        List of RevenuePoint in date order (empty when start_date > end_date)
    """
    points = []
    day = start_date
    while day <= end_date:
        points.append(RevenuePoint(date=day, revenue=totals.get(day, Decimal("0"))))
        day += timedelta(days=1)
    return points


def first_week_start(start_date: date, today: date) -> date:
    """
    First Saturday-aligned week start on or after start_date

    The week containing `today` opens on the Saturday
    (sunday_weekday(today) + 1) % 7 days before it; every week boundary is
    a multiple of 7 days away from that Saturday.
    """
    anchor = today - timedelta(days=(sunday_weekday(today) + 1) % 7)
    offset = (anchor - start_date).days % 7
    return start_date + timedelta(days=offset)


def week_starts(start_date: date, end_date: date, today: date) -> List[date]:
    starts = []
    week_start = first_week_start(start_date, today)
    while week_start <= end_date:
        starts.append(week_start)
        week_start += timedelta(days=7)
    return starts


def weekly_series(starts: List[date], totals: Dict[date, Decimal]) -> List[RevenuePoint]:
    """
    Sum daily totals into [week_start, week_start + 7 days) buckets

    Every start gets a point, zero when no order falls in its week.
    """
    points = []
    for week_start in starts:
        week_end = week_start + timedelta(days=7)
        revenue = sum(
            (amount for day, amount in totals.items() if week_start <= day < week_end),
            Decimal("0"),
        )
        points.append(RevenuePoint(date=week_start, revenue=revenue))
    return points


T = TypeVar("T", CustomerRevenue, ProductRevenue)


def fold_top_n(ranked: Iterable[T], make_other: Callable[[Decimal], T], n: int = TOP_N) -> List[T]:
    """
    Keep the n highest groups and fold everything else into one Other row

    Args:
        ranked: Every group with its revenue (any order)
        make_other: Builds the remainder row from the folded revenue
        n: How many groups to keep individually

    Returns:
        Top n groups plus the Other row (revenue 0 when nothing was folded),
        ordered by revenue descending. Ties keep their input order.
    """
    groups = sorted(ranked, key=lambda group: group.revenue, reverse=True)
    top = groups[:n]
    remainder = sum((group.revenue for group in groups[n:]), Decimal("0"))

    result = top + [make_other(remainder)]
    result.sort(key=lambda group: group.revenue, reverse=True)
    return result
