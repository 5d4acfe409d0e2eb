import cmd
from datetime import date
from uuid import uuid4

from codicash.logic import (
    growth_series,
    category_totals,
    expense_stats,
    overview,
    query_expenses,
    time_range_bounds,
    delete_expense,
    delete_expenses_by_criteria,
    update_expense
)
from codicash.models import CustomRange, ExpenseCategory, ExpenseRecord, ExpenseStatus, TimeRange
from codicash.storage import save_expenses, load_expenses, list_save_files


class CodiCashCLI(cmd.Cmd):
    prompt = "(codicash) "

    def __init__(self, expenses=None):
        super().__init__()
        self.intro = "Welcome to Codi Cash. Type 'help' for commands."
        self.expenses = list(expenses or [])
        self.selector = TimeRange.ALL

    # ===== EXPENSES =====
    def do_add(self, arg):
        """Add an expense: add <value> <fixed|variable> [YYYY-MM-DD] [--status pending|paid] [--desc "description"]"""
        try:
            args = self._parse_add_args(arg)
            record = ExpenseRecord(
                id=uuid4().hex[:8],
                date=args['date'].isoformat(),
                value=args['value'],
                category=args['category'],
                status=args['status'],
                description=args['desc']
            )
            self.expenses.append(record)
            print(f"✓ Added {record.category} expense of ${record.value:.2f} on {record.date} (id {record.id})")
        except ValueError as e:
            print(f"Invalid input: {e}")

    def do_list(self, arg):
        """
        List expenses in the current range:
        list [--category NAME] [--status NAME] [--search TEXT] [--page N] [--limit N]
        """
        try:
            args = self._parse_list_args(arg)
            result = query_expenses(self.expenses, self.selector, **args)
        except ValueError as e:
            print(f"Invalid input: {e}")
            return

        if not result.expenses:
            print("No expenses found for the selected range")
            return

        print(f"\nPage {result.page}/{result.total_pages} ({result.total} expenses)")
        for record in result.expenses:
            print(f"  [{record.id}] {record.date}  {record.category:<9} {record.status:<8} "
                  f"${record.value:>10,.2f}  {record.description}")

    def do_delete(self, arg):
        """Delete expenses: delete <ID> OR delete --filter [--category NAME] [--status NAME] [--from DATE] [--to DATE]"""
        args = arg.split()

        if not args:
            print("Usage:\n  delete <ID>\n  delete --filter [--category NAME] [--status NAME] [--from DATE] [--to DATE]")
            return

        try:
            if args[0] == "--filter":
                deleted_count = delete_expenses_by_criteria(self.expenses, **self._parse_delete_filter(args[1:]))
                print(f"✓ Deleted {deleted_count} expenses")
            elif delete_expense(self.expenses, args[0]):
                print(f"✓ Deleted expense {args[0]}")
            else:
                print("Expense not found")
        except ValueError as e:
            print(f"Invalid input: {e}")

    def do_update(self, arg):
        """Update an expense: update <ID> [--value X] [--category NAME] [--status NAME] [--date YYYY-MM-DD] [--desc "description"]"""
        args = arg.split()
        if not args:
            print("Usage: update <ID> [--value X] [--category NAME] [--status NAME] [--date YYYY-MM-DD] [--desc TEXT]")
            return

        try:
            record = update_expense(self.expenses, args[0], **self._parse_update_args(args[1:]))
        except ValueError as e:
            print(f"Invalid input: {e}")
            return

        if record is None:
            print("Expense not found")
        else:
            print(f"✓ Updated expense {record.id}: {record.date} {record.category} {record.status} ${record.value:.2f}")

    # ===== RANGE =====
    def do_range(self, arg):
        """
        Select the time range used by reports:
        range <all|lastWeek|thisMonth|lastThreeMonths|thisYear>
        range <YYYY-MM-DD> <YYYY-MM-DD>
        """
        args = arg.split()
        if not args:
            start, end = time_range_bounds(self.selector)
            if start is None:
                print("Range: all")
            else:
                print(f"Range: {start} to {end}")
            return

        try:
            self.selector = self._parse_range_args(args)
        except ValueError as e:
            print(f"Invalid input: {e}")
            return
        print(f"✓ Range set to {arg.strip()}")

    # ===== REPORTS =====
    def do_growth(self, arg):
        """Show monthly expense totals for the current range"""
        series = growth_series(self.expenses, self.selector)
        if not series:
            print("No expenses found for the selected range")
            return

        print(f"\n{' Monthly Expenses ':-^40}")
        for month in series:
            print(f"  {month.period_label:<10} ${month.total_value:>12,.2f}")

    def do_categories(self, arg):
        """Show fixed vs. variable totals for the current range"""
        totals = category_totals(self.expenses, self.selector)
        print(f"\n{' Expense Types ':-^40}")
        print(f"  Fixed:    ${totals.fixed_total:,.2f}")
        print(f"  Variable: ${totals.variable_total:,.2f}")

    def do_stats(self, arg):
        """Show KPI totals for the current range"""
        self._print_stats(expense_stats(self.expenses, self.selector), "Expense Stats")

    def do_overview(self, arg):
        """Show KPI totals for the last month"""
        self._print_stats(overview(self.expenses), "Last Month")

    # ===== DATA MANAGEMENT =====
    def do_save(self, arg):
        """Save current expenses: save [name=default]"""
        name = arg.strip() or "default"
        try:
            save_expenses(self.expenses, name)
        except OSError as e:
            print(f"Error saving data: {e}")
            return
        print(f"✓ Saved {len(self.expenses)} expenses as '{name}'")

    def do_load(self, arg):
        """Load saved expenses: load [name]"""
        saves = list_save_files()
        if not saves:
            print("No save files available")
            return

        if not arg:
            print("Available saves:")
            for i, name in enumerate(saves, 1):
                print(f"{i}. {name}")
            try:
                choice = int(input("Select save: ")) - 1
                name = saves[choice]
            except (ValueError, IndexError):
                print("Invalid selection")
                return
        else:
            name = arg.strip()

        try:
            self.expenses = load_expenses(name)
        except (FileNotFoundError, ValueError) as e:
            print(f"Error loading data: {e}")
            return
        print(f"✓ Loaded {len(self.expenses)} expenses")

    # ===== UTILITIES =====
    def do_exit(self, arg):
        """Exit the program"""
        print("Goodbye!")
        return True

    # ===== HELPERS =====
    @staticmethod
    def _print_stats(stats, title):
        print(f"\n{' ' + title + ' ':-^40}")
        print(f"  Total:    ${stats.total:,.2f}")
        print(f"  Fixed:    ${stats.fixed:,.2f}")
        print(f"  Variable: ${stats.variable:,.2f}")
        print(f"  Pending:  ${stats.pending:,.2f}")

    @staticmethod
    def _parse_add_args(arg):
        """Parse add command arguments"""
        args = arg.split()
        if len(args) < 2:
            raise ValueError("Missing required arguments (value and category)")

        category = ExpenseCategory.parse(args[1])
        if category is None:
            raise ValueError("Category must be 'fixed' or 'variable'")

        result = {
            'value': float(args[0]),
            'category': category.value,
            'date': date.today(),
            'status': ExpenseStatus.PENDING.value,
            'desc': ""
        }
        if result['value'] < 0:
            raise ValueError("Value must not be negative")

        i = 2
        while i < len(args):
            if args[i] == '--status':
                status = ExpenseStatus.parse(args[i+1]) if i+1 < len(args) else None
                if status is None:
                    raise ValueError("Status must be 'pending' or 'paid'")
                result['status'] = status.value
                i += 2
            elif args[i] == '--desc':
                result['desc'] = ' '.join(args[i+1:]).strip('"')
                break
            elif args[i].startswith('--'):
                raise ValueError(f"Unknown flag: {args[i]}")
            else:
                try:
                    result['date'] = date.fromisoformat(args[i])
                except ValueError:
                    raise ValueError("Date must be in YYYY-MM-DD format")
                i += 1

        return result

    @staticmethod
    def _parse_list_args(arg):
        """Parse arguments for expense listing"""
        args = arg.split()
        result = {}

        i = 0
        while i < len(args):
            if i+1 >= len(args):
                raise ValueError(f"Missing value after {args[i]}")
            if args[i] == '--category':
                result['category'] = args[i+1]
            elif args[i] == '--status':
                result['status'] = args[i+1]
            elif args[i] == '--search':
                result['search'] = args[i+1]
            elif args[i] == '--page':
                result['page'] = int(args[i+1])
            elif args[i] == '--limit':
                result['limit'] = int(args[i+1])
            else:
                raise ValueError(f"Unknown flag: {args[i]}")
            i += 2

        return result

    @staticmethod
    def _parse_delete_filter(args):
        """Helper for filter-based deletion"""
        filters = {
            'category': None,
            'status': None,
            'date_range': None
        }

        i = 0
        while i < len(args):
            if i+1 >= len(args):
                raise ValueError(f"Missing value after {args[i]}")
            if args[i] == "--category":
                filters['category'] = args[i+1]
            elif args[i] == "--status":
                filters['status'] = args[i+1]
            elif args[i] == "--from":
                start_date = date.fromisoformat(args[i+1])
                filters['date_range'] = (start_date, filters['date_range'][1] if filters['date_range'] else date.max)
            elif args[i] == "--to":
                end_date = date.fromisoformat(args[i+1])
                filters['date_range'] = (filters['date_range'][0] if filters['date_range'] else date.min, end_date)
            else:
                raise ValueError(f"Unknown flag: {args[i]}")
            i += 2

        if not any(filters.values()):
            raise ValueError("At least one filter is required")
        return filters

    @staticmethod
    def _parse_update_args(args):
        """Parse the fields to change on an expense"""
        result = {}

        i = 0
        while i < len(args):
            if args[i] == '--desc':
                result['description'] = ' '.join(args[i+1:]).strip('"')
                break
            if i+1 >= len(args):
                raise ValueError(f"Missing value after {args[i]}")
            if args[i] == '--value':
                result['value'] = float(args[i+1])
            elif args[i] == '--category':
                result['category'] = args[i+1]
            elif args[i] == '--status':
                result['status'] = args[i+1]
            elif args[i] == '--date':
                result['date_str'] = args[i+1]
            else:
                raise ValueError(f"Unknown flag: {args[i]}")
            i += 2

        if not result:
            raise ValueError("Nothing to update")
        return result

    @staticmethod
    def _parse_range_args(args):
        """Parse a named range or a pair of dates"""
        if len(args) == 1:
            try:
                return TimeRange(args[0])
            except ValueError:
                names = ", ".join(r.value for r in TimeRange)
                raise ValueError(f"Range must be one of: {names}")

        if len(args) == 2:
            try:
                start, end = date.fromisoformat(args[0]), date.fromisoformat(args[1])
            except ValueError:
                raise ValueError("Dates must be in YYYY-MM-DD format")
            if start > end:
                raise ValueError("Start date must not be after end date")
            return CustomRange(start, end)

        raise ValueError("Expected a range name or two dates")
