import io
import json
import tempfile
import unittest
from datetime import date
from pathlib import Path
from unittest.mock import patch

from codicash.models import (
    MONTH_NAMES, month_label,
    ExpenseRecord, ExpenseCategory, ExpenseStatus, TimeRange, CustomRange,
    MonthlyTotal, CategoryTotals, ExpenseStats
)

from codicash.logic import (
    resolve_interval, time_range_bounds, filter_expenses_by_time,
    monthly_totals, growth_series, category_totals, expense_stats,
    overview, charts_data, query_expenses,
    find_expense, delete_expense, delete_expenses_by_criteria, update_expense
)

from codicash.storage import save_expenses, load_expenses, list_save_files
from codicash.cli import CodiCashCLI
from codicash.main import main


TODAY = date(2024, 3, 15)


def expense(d, value, category="Fixa", status="Pago", description="", id=None):
    return ExpenseRecord(date=d, value=value, category=category, status=status, description=description, id=id)


def scenario_a():
    return [
        expense("2024-01-10", 100, "Fixa", id="1"),
        expense("2024-01-20", 50, "Variavel", id="2"),
        expense("2024-02-05", 75, "Fixa", id="3"),
    ]


def as_pairs(series):
    return [(m.period_label, m.total_value) for m in series]


class TestModels(unittest.TestCase):
    def test_month_table(self):
        """One table drives every period label"""
        self.assertEqual(len(MONTH_NAMES), 12)
        self.assertEqual(month_label(2024, 1), "Jan 2024")
        self.assertEqual(month_label(2024, 2), "Fev 2024")
        self.assertEqual(month_label(2023, 12), "Dez 2023")

    def test_category_parsing(self):
        self.assertIs(ExpenseCategory.parse("Fixa"), ExpenseCategory.FIXED)
        self.assertIs(ExpenseCategory.parse("FIXED"), ExpenseCategory.FIXED)
        self.assertIs(ExpenseCategory.parse("variavel"), ExpenseCategory.VARIABLE)
        self.assertIs(ExpenseCategory.parse("Variable"), ExpenseCategory.VARIABLE)
        # case-insensitive only, no accent folding
        self.assertIsNone(ExpenseCategory.parse("Variável"))
        self.assertIsNone(ExpenseCategory.parse("Outro"))
        self.assertIsNone(ExpenseCategory.parse(None))

    def test_status_parsing(self):
        self.assertIs(ExpenseStatus.parse("Pendente"), ExpenseStatus.PENDING)
        self.assertIs(ExpenseStatus.parse("paid"), ExpenseStatus.PAID)
        self.assertIsNone(ExpenseStatus.parse("late"))

    def test_parsed_date(self):
        self.assertEqual(expense("2024-01-10", 1).parsed_date(), date(2024, 1, 10))
        for bad in ("2024-13-01", "not-a-date", "2024-1-5", "20240110", "", None):
            self.assertIsNone(expense(bad, 1).parsed_date(), bad)

    def test_record_dict_round_trip(self):
        data = {"id": "7", "date": "2024-01-10", "description": "Internet",
                "category": "Fixa", "value": "99.9", "status": "Pago"}
        record = ExpenseRecord.from_dict(data)
        self.assertEqual(record.value, 99.9)
        self.assertIs(record.category_kind, ExpenseCategory.FIXED)
        self.assertEqual(ExpenseRecord.from_dict(record.to_dict()), record)

    def test_chart_rows_drop_zero_buckets(self):
        self.assertEqual(CategoryTotals(10.0, 0.0).as_chart_rows(), [{"name": "fixed", "value": 10.0}])
        self.assertEqual(CategoryTotals().as_chart_rows(), [])


class TestTimeRangeFilter(unittest.TestCase):
    def setUp(self):
        self.records = [
            expense("2024-03-15", 10, id="today"),
            expense("2024-03-08", 20, id="week-start"),
            expense("2024-03-07", 40, id="before-week"),
            expense("2024-03-01", 80, id="month-start"),
            expense("2024-02-29", 160, id="leap-day"),
            expense("2023-12-15", 320, id="quarter-start"),
            expense("2023-12-14", 640, id="before-quarter"),
            expense("2024-03-16", 1280, id="tomorrow"),
        ]

    def ids(self, selector):
        return [r.id for r in filter_expenses_by_time(self.records, selector, TODAY)]

    def test_all_is_identity(self):
        self.assertIs(filter_expenses_by_time(self.records, TimeRange.ALL, TODAY), self.records)
        self.assertIs(filter_expenses_by_time(self.records, "all", TODAY), self.records)

    def test_invalid_records(self):
        for records in (None, 42, "2024-01-10", {"date": "2024-01-10"}):
            self.assertEqual(filter_expenses_by_time(records, TimeRange.ALL, TODAY), [])
            self.assertEqual(filter_expenses_by_time(records, TimeRange.THIS_YEAR, TODAY), [])

    def test_last_week(self):
        self.assertEqual(self.ids(TimeRange.LAST_WEEK), ["today", "week-start"])

    def test_this_month(self):
        self.assertEqual(self.ids(TimeRange.THIS_MONTH), ["today", "week-start", "before-week", "month-start"])

    def test_last_three_months(self):
        self.assertEqual(
            self.ids(TimeRange.LAST_THREE_MONTHS),
            ["today", "week-start", "before-week", "month-start", "leap-day", "quarter-start"]
        )

    def test_this_year(self):
        self.assertEqual(
            self.ids("thisYear"),
            ["today", "week-start", "before-week", "month-start", "leap-day"]
        )

    def test_custom_range_inclusive(self):
        selector = CustomRange(date(2024, 2, 29), date(2024, 3, 7))
        self.assertEqual(self.ids(selector), ["before-week", "month-start", "leap-day"])

    def test_inverted_custom_range_is_empty(self):
        selector = CustomRange(date(2024, 3, 15), date(2024, 1, 1))
        with self.assertLogs("codicash.logic", level="WARNING"):
            self.assertEqual(filter_expenses_by_time(self.records, selector, TODAY), [])

    def test_unrecognized_selector_keeps_everything(self):
        self.assertIs(filter_expenses_by_time(self.records, "lastDecade", TODAY), self.records)
        self.assertIs(filter_expenses_by_time(self.records, 7, TODAY), self.records)

    def test_malformed_dates_excluded_from_intervals(self):
        records = [expense("garbage", 5, id="bad"), expense("2024-03-10", 5, id="good")]
        self.assertEqual([r.id for r in filter_expenses_by_time(records, TimeRange.THIS_MONTH, TODAY)], ["good"])

    def test_does_not_mutate_input(self):
        before = list(self.records)
        filter_expenses_by_time(self.records, TimeRange.LAST_WEEK, TODAY)
        self.assertEqual(self.records, before)

    @patch("codicash.logic.date")
    def test_today_resolved_once(self, mock_date):
        """Wall clock is read once per filter pass, not per record"""
        mock_date.today.return_value = TODAY
        filter_expenses_by_time(self.records, TimeRange.LAST_WEEK)
        self.assertEqual(mock_date.today.call_count, 1)

    def test_resolve_interval(self):
        self.assertIsNone(resolve_interval(TimeRange.ALL, TODAY))
        self.assertEqual(resolve_interval(TimeRange.LAST_WEEK, TODAY), (date(2024, 3, 8), TODAY))
        self.assertEqual(resolve_interval(TimeRange.THIS_MONTH, TODAY), (date(2024, 3, 1), TODAY))
        self.assertEqual(resolve_interval(TimeRange.THIS_YEAR, TODAY), (date(2024, 1, 1), TODAY))
        # calendar months clamp to the last day of a shorter month
        self.assertEqual(
            resolve_interval(TimeRange.LAST_THREE_MONTHS, date(2024, 5, 31)),
            (date(2024, 2, 29), date(2024, 5, 31))
        )

    def test_time_range_bounds(self):
        self.assertEqual(time_range_bounds(TimeRange.ALL, TODAY), (None, None))
        self.assertEqual(time_range_bounds("unknown", TODAY), (None, None))
        custom = CustomRange(date(2024, 1, 1), date(2024, 1, 31))
        self.assertEqual(time_range_bounds(custom, TODAY), (date(2024, 1, 1), date(2024, 1, 31)))


class TestGrowthAggregator(unittest.TestCase):
    def test_scenario_a(self):
        series = growth_series(scenario_a(), TimeRange.ALL, TODAY)
        self.assertEqual(as_pairs(series), [("Jan 2024", 150.0), ("Fev 2024", 75.0)])

    def test_scenario_b_empty(self):
        self.assertEqual(growth_series([], TimeRange.THIS_YEAR, TODAY), [])
        self.assertEqual(growth_series(None, TimeRange.ALL, TODAY), [])

    def test_scenario_c_custom_range(self):
        selector = CustomRange(date(2024, 1, 15), date(2024, 1, 31))
        self.assertEqual(as_pairs(growth_series(scenario_a(), selector, TODAY)), [("Jan 2024", 50.0)])

    def test_scenario_d_unknown_category_counted(self):
        records = scenario_a() + [expense("2024-02-10", 30, "Outro")]
        self.assertEqual(
            as_pairs(growth_series(records, TimeRange.ALL, TODAY)),
            [("Jan 2024", 150.0), ("Fev 2024", 105.0)]
        )

    def test_chronological_across_years(self):
        records = [
            expense("2024-01-05", 1),
            expense("2023-12-31", 2),
            expense("2023-02-01", 4),
            expense("2024-01-20", 8),
            expense("2022-11-11", 16),
        ]
        series = growth_series(records, TimeRange.ALL, TODAY)
        self.assertEqual(
            as_pairs(series),
            [("Nov 2022", 16.0), ("Fev 2023", 4.0), ("Dez 2023", 2.0), ("Jan 2024", 9.0)]
        )
        keys = [(m.year, m.month) for m in series]
        self.assertEqual(keys, sorted(set(keys)))

    def test_filter_applied_once(self):
        records = scenario_a() + [expense("2023-06-01", 500)]
        selector = TimeRange.THIS_YEAR
        filtered = filter_expenses_by_time(records, selector, TODAY)
        self.assertEqual(
            growth_series(filtered, TimeRange.ALL, TODAY),
            growth_series(records, selector, TODAY)
        )

    def test_sum_invariant(self):
        records = scenario_a() + [expense("2024-03-02", 12.5, "Outro"), expense("2023-01-01", 99)]
        filtered = filter_expenses_by_time(records, TimeRange.THIS_YEAR, TODAY)
        series = growth_series(records, TimeRange.THIS_YEAR, TODAY)
        self.assertAlmostEqual(sum(m.total_value for m in series), sum(r.value for r in filtered))

    def test_totals_rounded(self):
        records = [expense("2024-01-01", 0.1), expense("2024-01-02", 0.2)]
        self.assertEqual(growth_series(records, TimeRange.ALL, TODAY)[0].total_value, 0.3)

    def test_malformed_dates_skipped_and_counted(self):
        records = scenario_a() + [expense("2024-13-01", 5), expense("soon", 5)]
        series, skipped = monthly_totals(records)
        self.assertEqual(skipped, 2)
        self.assertEqual(as_pairs(series), [("Jan 2024", 150.0), ("Fev 2024", 75.0)])

        with self.assertLogs("codicash.logic", level="WARNING") as logs:
            series = growth_series(records, TimeRange.ALL, TODAY)
        self.assertEqual(len(series), 2)
        self.assertIn("Skipped 2", logs.output[0])

    def test_monthly_total_label(self):
        self.assertEqual(MonthlyTotal(2024, 10, 1.0).period_label, "Out 2024")


class TestCategoryAggregator(unittest.TestCase):
    def test_scenario_a(self):
        self.assertEqual(category_totals(scenario_a(), TimeRange.ALL, TODAY), CategoryTotals(175.0, 50.0))

    def test_scenario_b_empty(self):
        self.assertEqual(category_totals([], TimeRange.LAST_WEEK, TODAY), CategoryTotals(0.0, 0.0))
        self.assertEqual(category_totals(None, TimeRange.ALL, TODAY), CategoryTotals(0.0, 0.0))

    def test_scenario_c_custom_range(self):
        selector = CustomRange(date(2024, 1, 15), date(2024, 1, 31))
        self.assertEqual(category_totals(scenario_a(), selector, TODAY), CategoryTotals(0.0, 50.0))

    def test_scenario_d_unknown_category_excluded(self):
        records = scenario_a() + [expense("2024-02-10", 30, "Outro")]
        totals = category_totals(records, TimeRange.ALL, TODAY)
        self.assertEqual(totals, CategoryTotals(175.0, 50.0))
        self.assertLess(totals.fixed_total + totals.variable_total, sum(r.value for r in records))

    def test_case_insensitive_match(self):
        records = [
            expense("2024-01-01", 10, "FIXA"),
            expense("2024-01-01", 20, "fixed"),
            expense("2024-01-01", 40, "VARIAVEL"),
            expense("2024-01-01", 80, "Variable"),
        ]
        self.assertEqual(category_totals(records, TimeRange.ALL, TODAY), CategoryTotals(30.0, 120.0))

    def test_zero_buckets_kept(self):
        records = [expense("2024-01-01", 10, "Fixa")]
        self.assertEqual(category_totals(records, TimeRange.ALL, TODAY).variable_total, 0.0)


class TestSupplementaryQueries(unittest.TestCase):
    def setUp(self):
        self.records = [
            expense("2024-03-10", 100, "Fixa", "Pago", "Internet", id="1"),
            expense("2024-03-12", 50, "Variavel", "Pendente", "Anúncios no Instagram", id="2"),
            expense("2024-02-20", 30, "Outro", "Pendente", "Café", id="3"),
            expense("2024-01-05", 20, "fixed", "pending", "Conta de energia", id="4"),
            expense("unknown", 5, "Fixa", "Pago", "Legacy import", id="5"),
        ]

    def test_expense_stats(self):
        stats = expense_stats(self.records[:4], TimeRange.ALL, TODAY)
        self.assertEqual(stats, ExpenseStats(total=200.0, fixed=120.0, variable=50.0, pending=100.0))

    def test_expense_stats_in_range(self):
        stats = expense_stats(self.records, TimeRange.THIS_MONTH, TODAY)
        self.assertEqual(stats, ExpenseStats(total=150.0, fixed=100.0, variable=50.0, pending=50.0))

    def test_overview_last_month(self):
        stats = overview(self.records, TODAY)
        self.assertEqual(stats.total, 180.0)
        self.assertEqual(stats.pending, 80.0)

    def test_charts_data(self):
        data = charts_data(self.records, TimeRange.THIS_YEAR, TODAY)
        self.assertEqual(
            as_pairs(data["growth"]),
            [("Jan 2024", 20.0), ("Fev 2024", 30.0), ("Mar 2024", 150.0)]
        )
        self.assertEqual(data["categories"], CategoryTotals(120.0, 50.0))

    def test_query_sorted_newest_first(self):
        result = query_expenses(self.records, today=TODAY)
        self.assertEqual([r.id for r in result.expenses], ["2", "1", "3", "4", "5"])
        self.assertEqual(result.total, 5)
        self.assertEqual(result.total_pages, 1)

    def test_query_paging(self):
        result = query_expenses(self.records, page=2, limit=2, today=TODAY)
        self.assertEqual(result.page, 2)
        self.assertEqual(result.total_pages, 3)
        self.assertEqual([r.id for r in result.expenses], ["3", "4"])

        result = query_expenses(self.records, page=4, limit=2, today=TODAY)
        self.assertEqual(result.expenses, [])

    def test_query_filters(self):
        result = query_expenses(self.records, category="fixed", today=TODAY)
        self.assertEqual([r.id for r in result.expenses], ["1", "4", "5"])

        result = query_expenses(self.records, status="Pendente", today=TODAY)
        self.assertEqual([r.id for r in result.expenses], ["2", "3", "4"])

        result = query_expenses(self.records, category="outro", today=TODAY)
        self.assertEqual([r.id for r in result.expenses], ["3"])

        result = query_expenses(self.records, search="INSTA", today=TODAY)
        self.assertEqual([r.id for r in result.expenses], ["2"])

        result = query_expenses(self.records, TimeRange.THIS_MONTH, category="", status="", today=TODAY)
        self.assertEqual([r.id for r in result.expenses], ["2", "1"])

    def test_query_rejects_bad_paging(self):
        with self.assertRaises(ValueError):
            query_expenses(self.records, page=0)
        with self.assertRaises(ValueError):
            query_expenses(self.records, limit=0)


class TestStorage(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.saves_dir = Path(self.tmp.name)

    def tearDown(self):
        self.tmp.cleanup()

    def test_save_and_load(self):
        save_expenses(scenario_a(), "test_save", self.saves_dir)
        loaded = load_expenses("test_save", self.saves_dir)
        self.assertEqual(loaded, scenario_a())
        self.assertIn("test_save", list_save_files(self.saves_dir))

    def test_load_skips_invalid_entries(self):
        path = self.saves_dir / "test_partial.json"
        path.write_text(json.dumps({"expenses": [
            {"id": "1", "date": "2024-01-10", "value": 10, "category": "Fixa"},
            {"id": "2", "date": "2024-01-11", "value": "lots"},
            {"id": "3", "value": 5},
        ]}))

        with self.assertLogs("codicash.storage", level="WARNING"):
            loaded = load_expenses("test_partial", self.saves_dir)
        self.assertEqual([r.id for r in loaded], ["1"])

    def test_missing_save(self):
        with self.assertRaises(FileNotFoundError):
            load_expenses("test_missing", self.saves_dir)

    def test_load_null_fields(self):
        """JSON nulls in optional fields load as empty strings"""
        path = self.saves_dir / "test_nulls.json"
        path.write_text(json.dumps({"expenses": [
            {"id": "1", "date": "2024-01-10", "value": 10, "category": None, "status": None, "description": None},
        ]}))

        loaded = load_expenses("test_nulls", self.saves_dir)
        self.assertEqual(loaded[0].category, "")
        self.assertEqual(loaded[0].status, "")
        self.assertEqual(loaded[0].description, "")
        self.assertEqual(category_totals(loaded, TimeRange.ALL, TODAY), CategoryTotals(0.0, 0.0))

    def test_load_rejects_foreign_shapes(self):
        (self.saves_dir / "test_list.json").write_text(json.dumps([{"id": "1", "date": "2024-01-10", "value": 10}]))
        (self.saves_dir / "test_dict.json").write_text(json.dumps({"expenses": {"id": "1"}}))

        for name in ("test_list", "test_dict"):
            with self.assertRaises(ValueError):
                load_expenses(name, self.saves_dir)

    def test_load_malformed_json(self):
        (self.saves_dir / "test_broken.json").write_text("{not json")
        with self.assertRaises(ValueError):
            load_expenses("test_broken", self.saves_dir)


class TestMain(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.saves_dir = Path(self.tmp.name)

    def tearDown(self):
        self.tmp.cleanup()

    def test_bad_save_reports_error(self):
        (self.saves_dir / "test_broken.json").write_text("{not json")
        (self.saves_dir / "test_list.json").write_text("[]")

        with patch("codicash.config.SAVES_DIR", self.saves_dir), \
                patch("sys.stdout", new_callable=io.StringIO) as out:
            self.assertEqual(main(["test_broken"]), 1)
            self.assertEqual(main(["test_list"]), 1)
            self.assertEqual(main(["test_missing"]), 1)
        self.assertIn("is not a Codi Cash save", out.getvalue())
        self.assertIn("not found", out.getvalue())


class TestRecordManagement(unittest.TestCase):
    def setUp(self):
        self.records = scenario_a() + [expense("2024-03-01", 30, "Variavel", "Pendente", id="4")]

    def test_find_and_delete(self):
        self.assertEqual(find_expense(self.records, "2").value, 50)
        self.assertIsNone(find_expense(self.records, "99"))

        self.assertTrue(delete_expense(self.records, "2"))
        self.assertEqual([r.id for r in self.records], ["1", "3", "4"])
        self.assertFalse(delete_expense(self.records, "2"))

    def test_delete_by_criteria(self):
        deleted = delete_expenses_by_criteria(self.records, category="fixed")
        self.assertEqual(deleted, 2)
        self.assertEqual([r.id for r in self.records], ["2", "4"])

        deleted = delete_expenses_by_criteria(self.records, date_range=(date(2024, 3, 1), date(2024, 3, 31)))
        self.assertEqual(deleted, 1)
        self.assertEqual([r.id for r in self.records], ["2"])

    def test_delete_by_combined_criteria(self):
        deleted = delete_expenses_by_criteria(
            self.records, category="variavel", status="pending",
            date_range=(date(2024, 1, 1), date(2024, 12, 31))
        )
        self.assertEqual(deleted, 1)
        self.assertIsNone(find_expense(self.records, "4"))

    def test_update(self):
        record = update_expense(self.records, "1", value=120.5, status="pendente", description="Aluguel")
        self.assertEqual(record.value, 120.5)
        self.assertEqual(record.status, "pending")
        self.assertEqual(record.description, "Aluguel")
        self.assertEqual(category_totals(self.records, TimeRange.ALL, TODAY).fixed_total, 195.5)

        record = update_expense(self.records, "1", category="Variable", date_str="2024-02-10")
        self.assertEqual(record.category, "variable")
        self.assertEqual(as_pairs(growth_series(self.records, TimeRange.ALL, TODAY))[0], ("Jan 2024", 50.0))

        self.assertIsNone(update_expense(self.records, "99", value=1.0))

    def test_update_is_all_or_nothing(self):
        for changes in ({"value": -1.0}, {"value": 5.0, "category": "Outro"},
                        {"status": "late"}, {"value": 5.0, "date_str": "2024-1-5"}):
            with self.assertRaises(ValueError):
                update_expense(self.records, "1", **changes)
        self.assertEqual(self.records[0], scenario_a()[0])


class TestCLI(unittest.TestCase):
    def run_commands(self, cli, *commands):
        with patch("sys.stdout", new_callable=io.StringIO) as out:
            for command in commands:
                cli.onecmd(command)
        return out.getvalue()

    def test_add_and_report(self):
        cli = CodiCashCLI()
        output = self.run_commands(
            cli,
            "add 100 Fixa 2024-01-10 --status pago --desc Internet",
            "add 50 variable 2024-01-20",
            "range 2024-01-01 2024-01-31",
            "categories",
            "growth",
        )
        self.assertEqual(len(cli.expenses), 2)
        self.assertEqual(cli.expenses[0].category, "fixed")
        self.assertEqual(cli.expenses[0].status, "paid")
        self.assertEqual(cli.expenses[0].description, "Internet")
        self.assertEqual(cli.selector, CustomRange(date(2024, 1, 1), date(2024, 1, 31)))
        self.assertIn("Fixed:    $100.00", output)
        self.assertIn("Variable: $50.00", output)
        self.assertIn("Jan 2024", output)

    def test_invalid_input(self):
        cli = CodiCashCLI()
        output = self.run_commands(cli, "add 10 Outro", "range yesterday", "range 2024-02-01 2024-01-01")
        self.assertEqual(cli.expenses, [])
        self.assertIs(cli.selector, TimeRange.ALL)
        self.assertEqual(output.count("Invalid input"), 3)

    def test_list_and_stats(self):
        cli = CodiCashCLI(scenario_a())
        output = self.run_commands(cli, "list --category fixa --limit 1", "stats")
        self.assertIn("Page 1/2 (2 expenses)", output)
        self.assertIn("2024-02-05", output)
        self.assertIn("Total:    $225.00", output)

    def test_delete_and_update(self):
        cli = CodiCashCLI(scenario_a())
        output = self.run_commands(
            cli,
            "delete 2",
            "delete 99",
            "update 1 --value 110 --status paid --desc Conta de energia",
            "update 3 --category outro",
            "update 99 --value 1",
            "delete --filter --from 2024-02-01 --to 2024-02-28",
            "delete --filter",
        )
        self.assertEqual([r.id for r in cli.expenses], ["1"])
        self.assertEqual(cli.expenses[0].value, 110.0)
        self.assertEqual(cli.expenses[0].description, "Conta de energia")
        self.assertIn("✓ Deleted expense 2", output)
        self.assertEqual(output.count("Expense not found"), 2)
        self.assertIn("✓ Updated expense 1", output)
        self.assertIn("✓ Deleted 1 expenses", output)
        self.assertEqual(output.count("Invalid input"), 2)

    def test_list_null_fields(self):
        cli = CodiCashCLI([ExpenseRecord.from_dict(
            {"id": "1", "date": "2024-01-10", "value": 10, "category": None, "status": None}
        )])
        output = self.run_commands(cli, "list")
        self.assertIn("[1] 2024-01-10", output)

    def test_range_display(self):
        cli = CodiCashCLI()
        output = self.run_commands(cli, "range", "range 2024-01-01 2024-01-31", "range")
        self.assertIn("Range: all", output)
        self.assertIn("Range: 2024-01-01 to 2024-01-31", output)

    def test_overview(self):
        cli = CodiCashCLI()
        output = self.run_commands(cli, "add 40 fixa", "add 60 variavel 2000-01-01", "overview")
        self.assertIn("Last Month", output)
        self.assertIn("Total:    $40.00", output)
        self.assertIn("Pending:  $40.00", output)

    def test_save_and_load(self):
        with tempfile.TemporaryDirectory() as tmp, patch("codicash.config.SAVES_DIR", Path(tmp)):
            (Path(tmp) / "test_nulls.json").write_text(json.dumps({"expenses": [
                {"id": "n", "date": "2024-01-10", "value": 10, "category": None, "status": None},
            ]}))
            (Path(tmp) / "test_list.json").write_text("[]")

            cli = CodiCashCLI(scenario_a())
            output = self.run_commands(cli, "save test_cli")
            self.assertTrue((Path(tmp) / "test_cli.json").exists())

            restored = CodiCashCLI()
            output += self.run_commands(restored, "load test_cli", "categories")
            self.assertEqual(restored.expenses, scenario_a())

            output += self.run_commands(restored, "load test_list")
            self.assertEqual(restored.expenses, scenario_a())

            output += self.run_commands(restored, "load test_nulls", "list")

        self.assertIn("✓ Saved 3 expenses as 'test_cli'", output)
        self.assertIn("✓ Loaded 3 expenses", output)
        self.assertIn("Fixed:    $175.00", output)
        self.assertIn("Error loading data", output)
        self.assertIn("[n] 2024-01-10", output)


if __name__ == "__main__":
    unittest.main()
