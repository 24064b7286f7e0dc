"""Debt analytics - derived metrics computed from a user's debts

Every function here is pure: it reads the attributes of the debt objects it is
given (``total_amount``, ``total_paid``, ``monthly_payment``, ``interest_rate``,
``date_of_loan``, ...) and never touches the database or the request. Model
instances and plain objects with the same attributes are both accepted.
"""
import math
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from dateutil.relativedelta import relativedelta

# Sentinel returned when no monthly payment is set
UNSPECIFIED = 0

AVERAGE_DAYS_PER_MONTH = 30.44

# Priority weights (balance: 40%, payoff time: 35%, monthly payment: 25%)
BALANCE_WEIGHT = 0.40
PAYOFF_WEIGHT = 0.35
PAYMENT_WEIGHT = 0.25

DEFAULT_PRIORITY_LIMIT = 5

REASON_HIGHEST_BALANCE = 'Highest Balance'
REASON_LONGEST_PAYOFF = 'Longest Payoff Time'
REASON_HIGHEST_PAYMENT = 'Highest Monthly Payment'
REASON_DEFAULT = 'High Priority'


def _amount(value):
    """Convert a stored amount (None, Decimal, int, float) to float"""
    return float(value or 0)


def _as_date(value):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str):
        return datetime.strptime(value, '%Y-%m-%d').date()
    return value


def _today(today):
    return _as_date(today) if today is not None else datetime.utcnow().date()


def _round_half_up(value):
    return int(Decimal(str(value)).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def _plural(count, word):
    return f'{count} {word}' if count == 1 else f'{count} {word}s'


# Remaining balance & progress

def compute_remaining(debt):
    """Remaining balance, display progress and paid status of one debt"""
    total_amount = _amount(debt.total_amount)
    total_paid = _amount(debt.total_paid)

    remaining = max(total_amount - total_paid, 0.0)
    progress = (total_paid / total_amount) * 100 if total_amount > 0 else 0.0

    return {
        'remaining': remaining,
        'progress_percent': min(max(progress, 0.0), 100.0),
        'is_paid': total_paid >= total_amount,
        'overpaid': max(total_paid - total_amount, 0.0),
    }


def is_paid(debt):
    return _amount(debt.total_paid) >= _amount(debt.total_amount)


# Payoff duration

def compute_payoff_months(total_amount, monthly_payment):
    """Months needed to pay ``total_amount`` at ``monthly_payment`` per month

    Interest is ignored. Returns ``UNSPECIFIED`` (0) when there is no
    monthly payment to divide by.
    """
    total_amount = _amount(total_amount)
    monthly_payment = _amount(monthly_payment)
    if monthly_payment <= 0:
        return UNSPECIFIED
    return int(math.ceil(total_amount / monthly_payment))


def format_duration(months):
    """Render a month count as years and months, e.g. '1 year and 2 months'"""
    if not months:
        return 'N/A'

    years, remaining_months = divmod(int(months), 12)

    if years == 0:
        return _plural(remaining_months, 'month')
    if remaining_months == 0:
        return _plural(years, 'year')
    return f"{_plural(years, 'year')} and {_plural(remaining_months, 'month')}"


def debt_payoff_months(debt):
    return compute_payoff_months(debt.total_amount, debt.monthly_payment)


# Priority scoring

def _ratio(value, maximum):
    return value / maximum if maximum > 0 else 0.0


def rank_by_priority(debts):
    """Rank debts for attention, highest priority score first

    Returns one entry per debt: ``{'debt', 'priority_score', 'reasons'}``.
    Equal scores keep the order in which the debts were given.
    """
    debts = list(debts)
    if not debts:
        return []

    balances = [_amount(d.total_amount) for d in debts]
    payoffs = [debt_payoff_months(d) for d in debts]
    payments = [_amount(d.monthly_payment) for d in debts]

    max_balance = max(balances)
    max_payoff = max(payoffs)
    max_payment = max(payments)

    ranked = []
    for debt, balance, payoff, payment in zip(debts, balances, payoffs, payments):
        score = (BALANCE_WEIGHT * _ratio(balance, max_balance)
                 + PAYOFF_WEIGHT * _ratio(payoff, max_payoff)
                 + PAYMENT_WEIGHT * _ratio(payment, max_payment))

        reasons = []
        if balance == max_balance:
            reasons.append(REASON_HIGHEST_BALANCE)
        if payoff == max_payoff:
            reasons.append(REASON_LONGEST_PAYOFF)
        if payment == max_payment:
            reasons.append(REASON_HIGHEST_PAYMENT)

        ranked.append({
            'debt': debt,
            'priority_score': min(max(score, 0.0), 1.0),
            'reasons': reasons or [REASON_DEFAULT],
        })

    # sorted() is stable with reverse=True, ties keep insertion order
    return sorted(ranked, key=lambda entry: entry['priority_score'], reverse=True)


def priority_debts(debts, limit=DEFAULT_PRIORITY_LIMIT):
    """Top ``limit`` entries of :func:`rank_by_priority`"""
    return rank_by_priority(debts)[:limit]


# Interest

def months_elapsed(since, today=None):
    """Whole average-length months between ``since`` and ``today``"""
    since = _as_date(since)
    if not since:
        return 0
    days = (_today(today) - since).days
    return max(int(math.floor(days / AVERAGE_DAYS_PER_MONTH)), 0)


def compute_overdue_amount(debt, today=None):
    """Shortfall between the payments expected by now and those actually made"""
    monthly_payment = _amount(debt.monthly_payment)
    expected_payments = months_elapsed(debt.date_of_loan, today) * monthly_payment
    return max(expected_payments - _amount(debt.total_paid), 0.0)


def compute_interest_accrued(debt, today=None):
    """Simple interest on the overdue shortfall, scaled by elapsed months

    Linear approximation: no compounding, no amortization.
    Debts without an interest rate or without a monthly payment accrue 0.
    """
    interest_rate = _amount(debt.interest_rate)
    monthly_payment = _amount(debt.monthly_payment)
    if interest_rate <= 0 or monthly_payment <= 0:
        return 0.0

    elapsed = months_elapsed(debt.date_of_loan, today)
    overdue_amount = compute_overdue_amount(debt, today)
    monthly_rate = interest_rate / 100 / 12

    return max(overdue_amount * monthly_rate * elapsed, 0.0)


def compute_current_interest_projection(debt):
    """Monthly and annual interest on the current remaining balance"""
    interest_rate = _amount(debt.interest_rate)
    remaining = compute_remaining(debt)['remaining']

    if interest_rate <= 0 or remaining <= 0:
        return {'monthly_interest': 0.0, 'annual_interest': 0.0}

    return {
        'monthly_interest': remaining * (interest_rate / 100 / 12),
        'annual_interest': remaining * (interest_rate / 100),
    }


# Portfolio aggregates

def aggregate_portfolio(debts, today=None):
    """Totals, counts, progress and interest figures across all of a user's debts"""
    total_debt = 0.0
    total_paid = 0.0
    completed_count = 0
    highest_debt = None
    overdue_count = 0
    total_interest_accrued = 0.0
    monthly_interest = 0.0
    annual_interest = 0.0
    count = 0

    for debt in debts:
        count += 1
        amount = _amount(debt.total_amount)
        total_debt += amount
        total_paid += _amount(debt.total_paid)

        if is_paid(debt):
            completed_count += 1

        # Strict comparison keeps the first of equal balances
        if highest_debt is None or amount > _amount(highest_debt.total_amount):
            highest_debt = debt

        accrued = compute_interest_accrued(debt, today)
        if accrued > 0:
            overdue_count += 1
            total_interest_accrued += accrued

        projection = compute_current_interest_projection(debt)
        monthly_interest += projection['monthly_interest']
        annual_interest += projection['annual_interest']

    return {
        'total_debt': total_debt,
        'total_paid': total_paid,
        'remaining_debt': max(total_debt - total_paid, 0.0),
        'active_count': count - completed_count,
        'completed_count': completed_count,
        'average_progress': (total_paid / total_debt) * 100 if total_debt > 0 else 0.0,
        'highest_debt': highest_debt,
        'overdue_count': overdue_count,
        'total_interest_accrued': total_interest_accrued,
        'monthly_interest': monthly_interest,
        'annual_interest': annual_interest,
    }


def max_payoff_months(debts):
    """Longest payoff horizon among debts that have a monthly payment"""
    return max((debt_payoff_months(d) for d in debts), default=UNSPECIFIED)


def estimate_debt_free_date(debts, today=None):
    """Date all debts are paid off if each gets its own monthly payment in parallel

    Returns None when no debt has a monthly payment set.
    """
    months = max_payoff_months(debts)
    if months == UNSPECIFIED:
        return None
    return _today(today) + relativedelta(months=months)


def total_monthly_payment(debts):
    return sum(_amount(d.monthly_payment) for d in debts if _amount(d.monthly_payment) > 0)


def dashboard_summary(debts, today=None):
    """Portfolio aggregates plus the dashboard-only figures"""
    debts = list(debts)
    summary = aggregate_portfolio(debts, today)
    summary.update({
        'debt_count': len(debts),
        'total_monthly_payment': total_monthly_payment(debts),
        'estimated_debt_free_date': estimate_debt_free_date(debts, today),
        'months_until_debt_free': max_payoff_months(debts),
    })
    return summary


# Paid debts

def days_to_pay(debt, today=None):
    """Days from the loan date to the last payment (or today)"""
    start = _as_date(debt.date_of_loan)
    if not start:
        return None
    end = _as_date(debt.last_payment_date) or _today(today)
    return abs((end - start).days)


def format_time_to_pay(days):
    """Render a day count as days, months or years"""
    if days is None:
        return 'N/A'
    if days < 30:
        return _plural(_round_half_up(days), 'day')
    if days < 365:
        return _plural(_round_half_up(days / 30), 'month')

    years = int(days // 365)
    remaining_months = _round_half_up((days % 365) / 30)
    if remaining_months == 0:
        return _plural(years, 'year')
    return f'{years}y {remaining_months}m'


def paid_debt_stats(debts, today=None):
    """Statistics over the fully paid debts"""
    paid = [d for d in debts if is_paid(d)]

    total_cleared = sum(_amount(d.total_amount) for d in paid)
    durations = [days_to_pay(d, today) for d in paid]
    durations = [days for days in durations if days is not None]

    return {
        'count': len(paid),
        'total_cleared': total_cleared,
        'total_paid': sum(_amount(d.total_paid) for d in paid),
        'total_overpaid': sum(compute_remaining(d)['overpaid'] for d in paid),
        'average_debt_size': total_cleared / len(paid) if paid else 0.0,
        'average_days_to_pay': sum(durations) / len(durations) if durations else 0.0,
    }


def format_average_time_to_pay(days):
    """Render an average day count; a year or more is shown in tenths of years"""
    if days < 30:
        return _plural(_round_half_up(days), 'day')
    if days < 365:
        return _plural(_round_half_up(days / 30), 'month')

    years = float(Decimal(str(days / 365)).quantize(Decimal('0.1'), rounding=ROUND_HALF_UP))
    return f'{years:g} year' if years == 1 else f'{years:g} years'


def _paid_on(debt):
    paid_on = _as_date(debt.last_payment_date)
    if paid_on:
        return paid_on
    fallback = getattr(debt, 'updated_at', None) or getattr(debt, 'created_at', None)
    return _as_date(fallback) or date.min


PAID_SORT_KEYS = {
    'paid_date': _paid_on,
    'name': lambda d: (d.name or '').lower(),
    'amount': lambda d: _amount(d.total_amount),
    'total_paid': lambda d: _amount(d.total_paid),
    'overpaid': lambda d: compute_remaining(d)['overpaid'],
}


def sort_paid_debts(debts, sort_by='paid_date', order='desc'):
    """Order paid debts by one of ``PAID_SORT_KEYS``; unknown keys sort by paid date"""
    key = PAID_SORT_KEYS.get(sort_by, _paid_on)
    return sorted(debts, key=key, reverse=(order != 'asc'))


# Listing helpers

def filter_debts(debts, term):
    """Case-insensitive search on name, creditor and description"""
    if not term:
        return list(debts)
    term = term.lower()
    return [
        d for d in debts
        if term in (d.name or '').lower()
        or term in (d.creditor or '').lower()
        or term in (d.description or '').lower()
    ]


def sort_for_display(debts):
    """Unpaid debts first, then alphabetical by name"""
    return sorted(debts, key=lambda d: (is_paid(d), (d.name or '').lower()))
