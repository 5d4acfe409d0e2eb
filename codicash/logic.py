import logging
import math
from collections import defaultdict
from collections.abc import Sequence
from datetime import date, timedelta
from dateutil.relativedelta import relativedelta
from typing import Optional, Union

from codicash.config import DEFAULT_PAGE_LIMIT
from codicash.models import (
    TimeRange, CustomRange, ExpenseRecord, ExpenseCategory, ExpenseStatus,
    MonthlyTotal, CategoryTotals, ExpenseStats, ExpensePage
)


logger = logging.getLogger(__name__)

Selector = Union[TimeRange, CustomRange, str]


def _as_selector(selector) -> Optional[Union[TimeRange, CustomRange]]:
    if isinstance(selector, (TimeRange, CustomRange)):
        return selector
    if isinstance(selector, str):
        try:
            return TimeRange(selector)
        except ValueError:
            pass
    logger.debug("Unrecognized time range %r, keeping every record", selector)
    return None


def resolve_interval(selector: Selector, today: Optional[date] = None) -> Optional[tuple[date, date]]:
    """
    Turn a selector into inclusive (start, end) bounds.
    Returns None for TimeRange.ALL and for selectors it does not know.
    """
    selector = _as_selector(selector)
    if selector is None or selector is TimeRange.ALL:
        return None

    if isinstance(selector, CustomRange):
        return selector.start_date, selector.end_date

    today = today or date.today()
    if selector is TimeRange.LAST_WEEK:
        start = today - timedelta(days=7)
    elif selector is TimeRange.THIS_MONTH:
        start = today.replace(day=1)
    elif selector is TimeRange.LAST_THREE_MONTHS:
        start = today - relativedelta(months=3)
    else:
        start = today.replace(month=1, day=1)

    return start, today


def time_range_bounds(selector: Selector, today: Optional[date] = None) -> tuple[Optional[date], Optional[date]]:
    interval = resolve_interval(selector, today)
    if interval is None:
        return None, None
    return interval


def _is_record_sequence(records) -> bool:
    return isinstance(records, Sequence) and not isinstance(records, (str, bytes))


def filter_expenses_by_time(records, selector: Selector, today: Optional[date] = None):
    if not _is_record_sequence(records):
        return []

    interval = resolve_interval(selector, today)
    if interval is None:
        return records

    start, end = interval
    if start > end:
        logger.warning("Custom range starts after it ends (%s > %s), nothing matches", start, end)
        return []

    filtered = []
    for record in records:
        r_date = record.parsed_date()
        if r_date is None:
            logger.debug("Excluding expense %s with unreadable date %r", record.id, record.date)
            continue
        if start <= r_date <= end:
            filtered.append(record)
    return filtered


def monthly_totals(records) -> tuple[list[MonthlyTotal], int]:
    """
    Sum expense values per calendar month.
    Returns the chronological series and how many records were skipped
    because their date could not be read.
    """
    totals: dict[tuple[int, int], float] = defaultdict(float)
    skipped = 0

    for record in records:
        r_date = record.parsed_date()
        if r_date is None:
            skipped += 1
            continue
        totals[(r_date.year, r_date.month)] += record.value

    series = [
        MonthlyTotal(year=year, month=month, total_value=round(total, 2))
        for (year, month), total in sorted(totals.items())
    ]
    return series, skipped


def growth_series(records, selector: Selector, today: Optional[date] = None) -> list[MonthlyTotal]:
    filtered = filter_expenses_by_time(records, selector, today)
    series, skipped = monthly_totals(filtered)
    if skipped:
        logger.warning("Skipped %d expense(s) with malformed dates in growth series", skipped)
    return series


def category_totals(records, selector: Selector, today: Optional[date] = None) -> CategoryTotals:
    fixed = 0.0
    variable = 0.0

    for record in filter_expenses_by_time(records, selector, today):
        kind = record.category_kind
        if kind is ExpenseCategory.FIXED:
            fixed += record.value
        elif kind is ExpenseCategory.VARIABLE:
            variable += record.value

    return CategoryTotals(fixed_total=round(fixed, 2), variable_total=round(variable, 2))


def expense_stats(records, selector: Selector, today: Optional[date] = None) -> ExpenseStats:
    total = {
        "total": 0.0,
        "fixed": 0.0,
        "variable": 0.0,
        "pending": 0.0
    }

    for record in filter_expenses_by_time(records, selector, today):
        total["total"] += record.value
        kind = record.category_kind
        if kind is ExpenseCategory.FIXED:
            total["fixed"] += record.value
        elif kind is ExpenseCategory.VARIABLE:
            total["variable"] += record.value
        if record.status_kind is ExpenseStatus.PENDING:
            total["pending"] += record.value

    return ExpenseStats(**{key: round(amount, 2) for key, amount in total.items()})


def overview(records, today: Optional[date] = None) -> ExpenseStats:
    """KPI stats for the month leading up to today"""
    today = today or date.today()
    last_month = CustomRange(today - relativedelta(months=1), today)
    return expense_stats(records, last_month, today)


def charts_data(records, selector: Selector, today: Optional[date] = None) -> dict:
    today = today or date.today()
    return {
        "growth": growth_series(records, selector, today),
        "categories": category_totals(records, selector, today),
    }


def _matches(raw: str, wanted: str, parse) -> bool:
    kind = parse(wanted)
    if kind is None:
        return isinstance(raw, str) and raw.lower() == wanted.lower()
    return parse(raw) is kind


def query_expenses(
        records,
        selector: Selector = TimeRange.ALL,
        category: Optional[str] = None,
        status: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = DEFAULT_PAGE_LIMIT,
        today: Optional[date] = None,
) -> ExpensePage:
    if page < 1:
        raise ValueError("Page must be 1 or greater")
    if limit < 1:
        raise ValueError("Limit must be 1 or greater")

    matches = []
    for record in filter_expenses_by_time(records, selector, today):
        if category and not _matches(record.category, category, ExpenseCategory.parse):
            continue
        if status and not _matches(record.status, status, ExpenseStatus.parse):
            continue
        if search and search.lower() not in (record.description or "").lower():
            continue
        matches.append(record)

    def newest_first(record: ExpenseRecord):
        r_date = record.parsed_date()
        return r_date is not None, r_date or date.min

    matches.sort(key=newest_first, reverse=True)

    skip = (page - 1) * limit
    return ExpensePage(
        page=page,
        limit=limit,
        total=len(matches),
        total_pages=math.ceil(len(matches) / limit),
        expenses=matches[skip:skip + limit],
    )


def find_expense(records, expense_id: str) -> Optional[ExpenseRecord]:
    for record in records:
        if record.id == expense_id:
            return record
    return None


def delete_expense(records: list[ExpenseRecord], expense_id: str) -> bool:
    for i, record in enumerate(records):
        if record.id == expense_id:
            records.pop(i)
            return True
    return False


def delete_expenses_by_criteria(
        records: list[ExpenseRecord],
        category: Optional[str] = None,
        status: Optional[str] = None,
        date_range: Optional[tuple[date, date]] = None,
) -> int:
    """Remove every expense matching all given criteria, returns how many went"""
    def doomed(record: ExpenseRecord) -> bool:
        if category and not _matches(record.category, category, ExpenseCategory.parse):
            return False
        if status and not _matches(record.status, status, ExpenseStatus.parse):
            return False
        if date_range is not None:
            r_date = record.parsed_date()
            if r_date is None or not (date_range[0] <= r_date <= date_range[1]):
                return False
        return True

    initial_count = len(records)
    records[:] = [record for record in records if not doomed(record)]
    return initial_count - len(records)


def update_expense(
        records: list[ExpenseRecord],
        expense_id: str,
        value: Optional[float] = None,
        category: Optional[str] = None,
        status: Optional[str] = None,
        date_str: Optional[str] = None,
        description: Optional[str] = None,
) -> Optional[ExpenseRecord]:
    record = find_expense(records, expense_id)
    if record is None:
        return None

    changes = {}
    if value is not None:
        if value < 0:
            raise ValueError("Value must not be negative")
        changes['value'] = value
    if category is not None:
        kind = ExpenseCategory.parse(category)
        if kind is None:
            raise ValueError("Category must be 'fixed' or 'variable'")
        changes['category'] = kind.value
    if status is not None:
        kind = ExpenseStatus.parse(status)
        if kind is None:
            raise ValueError("Status must be 'pending' or 'paid'")
        changes['status'] = kind.value
    if date_str is not None:
        if ExpenseRecord(date=date_str, value=0.0).parsed_date() is None:
            raise ValueError("Date must be in YYYY-MM-DD format")
        changes['date'] = date_str
    if description is not None:
        changes['description'] = description

    for field_name, new_value in changes.items():
        setattr(record, field_name, new_value)
    return record
