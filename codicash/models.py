from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional, List


MONTH_NAMES = ("Jan", "Fev", "Mar", "Abr", "Mai", "Jun", "Jul", "Ago", "Set", "Out", "Nov", "Dez")


def month_label(year: int, month: int) -> str:
    return f"{MONTH_NAMES[month - 1]} {year}"


class ExpenseCategory(Enum):
    FIXED = "fixed"
    VARIABLE = "variable"

    @classmethod
    def parse(cls, value) -> Optional[ExpenseCategory]:
        if not isinstance(value, str):
            return None
        return _CATEGORY_ALIASES.get(value.lower())


class ExpenseStatus(Enum):
    PENDING = "pending"
    PAID = "paid"

    @classmethod
    def parse(cls, value) -> Optional[ExpenseStatus]:
        if not isinstance(value, str):
            return None
        return _STATUS_ALIASES.get(value.lower())


_CATEGORY_ALIASES = {
    "fixed": ExpenseCategory.FIXED,
    "fixa": ExpenseCategory.FIXED,
    "variable": ExpenseCategory.VARIABLE,
    "variavel": ExpenseCategory.VARIABLE,
}

_STATUS_ALIASES = {
    "pending": ExpenseStatus.PENDING,
    "pendente": ExpenseStatus.PENDING,
    "paid": ExpenseStatus.PAID,
    "pago": ExpenseStatus.PAID,
}


class TimeRange(str, Enum):
    ALL = "all"
    LAST_WEEK = "lastWeek"
    THIS_MONTH = "thisMonth"
    LAST_THREE_MONTHS = "lastThreeMonths"
    THIS_YEAR = "thisYear"


@dataclass(frozen=True)
class CustomRange:
    start_date: date
    end_date: date


@dataclass
class ExpenseRecord:
    date: str
    value: float
    category: str = ""
    description: str = ""
    status: str = ""
    id: Optional[str] = None

    @property
    def category_kind(self) -> Optional[ExpenseCategory]:
        return ExpenseCategory.parse(self.category)

    @property
    def status_kind(self) -> Optional[ExpenseStatus]:
        return ExpenseStatus.parse(self.status)

    def parsed_date(self) -> Optional[date]:
        """Calendar date of the record, None when the string is not yyyy-MM-dd"""
        if not isinstance(self.date, str) or len(self.date) != 10:
            return None
        try:
            return datetime.strptime(self.date, "%Y-%m-%d").date()
        except ValueError:
            return None

    @classmethod
    def from_dict(cls, data: dict) -> ExpenseRecord:
        return cls(
            date=data["date"],
            value=float(data["value"]),
            category=data.get("category") or "",
            description=data.get("description") or "",
            status=data.get("status") or "",
            id=data.get("id"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": self.date,
            "description": self.description,
            "category": self.category,
            "value": self.value,
            "status": self.status,
        }


@dataclass(frozen=True)
class MonthlyTotal:
    year: int
    month: int
    total_value: float

    @property
    def period_label(self) -> str:
        return month_label(self.year, self.month)


@dataclass(frozen=True)
class CategoryTotals:
    fixed_total: float = 0.0
    variable_total: float = 0.0

    def as_chart_rows(self) -> List[dict]:
        rows = [
            {"name": ExpenseCategory.FIXED.value, "value": self.fixed_total},
            {"name": ExpenseCategory.VARIABLE.value, "value": self.variable_total},
        ]
        return [row for row in rows if row["value"] > 0]


@dataclass(frozen=True)
class ExpenseStats:
    total: float = 0.0
    fixed: float = 0.0
    variable: float = 0.0
    pending: float = 0.0


@dataclass
class ExpensePage:
    page: int
    limit: int
    total: int
    total_pages: int
    expenses: List[ExpenseRecord] = field(default_factory=list)
