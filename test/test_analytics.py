"""
Tests for the debt analytics functions - remaining balance, payoff, priority,
interest and portfolio aggregates
"""
from datetime import date, timedelta
from decimal import Decimal
from types import SimpleNamespace
import pytest
from debttracker import analytics

TODAY = date(2025, 3, 1)


def make_debt(name='Debt', total_amount=1000, total_paid=0, monthly_payment=0,
              interest_rate=0, date_of_loan=TODAY, last_payment_date=None,
              creditor='', description=''):
    return SimpleNamespace(
        name=name,
        total_amount=total_amount,
        total_paid=total_paid,
        monthly_payment=monthly_payment,
        interest_rate=interest_rate,
        date_of_loan=date_of_loan,
        last_payment_date=last_payment_date,
        creditor=creditor,
        description=description,
    )


# Remaining balance & progress

def test_remaining_partial_payment():
    result = analytics.compute_remaining(make_debt(total_amount=1000, total_paid=250))
    assert result['remaining'] == 750
    assert result['progress_percent'] == 25
    assert result['is_paid'] is False
    assert result['overpaid'] == 0


def test_remaining_overpayment_is_clamped():
    result = analytics.compute_remaining(make_debt(total_amount=1000, total_paid=1200))
    assert result['remaining'] == 0
    assert result['progress_percent'] == 100
    assert result['is_paid'] is True
    assert result['overpaid'] == 200


def test_remaining_exact_payment_is_paid():
    assert analytics.is_paid(make_debt(total_amount=500, total_paid=500))
    assert not analytics.is_paid(make_debt(total_amount=500, total_paid=499.99))


def test_remaining_handles_decimal_and_missing_values():
    result = analytics.compute_remaining(make_debt(total_amount=Decimal('1000.00'), total_paid=None))
    assert result['remaining'] == 1000
    assert result['progress_percent'] == 0


def test_remaining_zero_total_has_no_division_error():
    result = analytics.compute_remaining(make_debt(total_amount=0, total_paid=0))
    assert result['progress_percent'] == 0
    assert result['remaining'] == 0


# Payoff duration

def test_payoff_months():
    assert analytics.compute_payoff_months(1000, 100) == 10
    assert analytics.compute_payoff_months(1000, 300) == 4
    assert analytics.compute_payoff_months(Decimal('12000.00'), Decimal('1000.00')) == 12


def test_payoff_months_unspecified():
    assert analytics.compute_payoff_months(1000, 0) == analytics.UNSPECIFIED
    assert analytics.compute_payoff_months(1000, None) == analytics.UNSPECIFIED


@pytest.mark.parametrize('months, expected', [
    (14, '1 year and 2 months'),
    (12, '1 year'),
    (3, '3 months'),
    (1, '1 month'),
    (24, '2 years'),
    (25, '2 years and 1 month'),
    (0, 'N/A'),
])
def test_format_duration(months, expected):
    assert analytics.format_duration(months) == expected


# Priority scoring

def test_rank_by_priority_orders_by_weighted_score():
    car = make_debt('Car Loan', total_amount=10000, monthly_payment=500)        # 20 months
    card = make_debt('Credit Card', total_amount=5000, monthly_payment=1000)    # 5 months
    phone = make_debt('Phone', total_amount=2000, monthly_payment=100)          # 20 months

    ranked = analytics.rank_by_priority([card, phone, car])

    assert [entry['debt'].name for entry in ranked] == ['Car Loan', 'Credit Card', 'Phone']
    # car: 0.40*1 + 0.35*1 + 0.25*0.5
    assert ranked[0]['priority_score'] == pytest.approx(0.875)
    # card: 0.40*0.5 + 0.35*0.25 + 0.25*1
    assert ranked[1]['priority_score'] == pytest.approx(0.5375)
    # phone: 0.40*0.2 + 0.35*1 + 0.25*0.1
    assert ranked[2]['priority_score'] == pytest.approx(0.455)


def test_rank_by_priority_reasons():
    car = make_debt('Car Loan', total_amount=10000, monthly_payment=500)
    card = make_debt('Credit Card', total_amount=5000, monthly_payment=1000)
    small = make_debt('Small', total_amount=900, monthly_payment=100)

    reasons = {e['debt'].name: e['reasons'] for e in analytics.rank_by_priority([car, card, small])}

    assert reasons['Car Loan'] == ['Highest Balance', 'Longest Payoff Time']
    assert reasons['Credit Card'] == ['Highest Monthly Payment']
    assert reasons['Small'] == ['High Priority']


def test_rank_by_priority_ties_keep_insertion_order():
    debts = [make_debt(f'Debt {i}', total_amount=1000, monthly_payment=100) for i in range(4)]
    ranked = analytics.rank_by_priority(debts)
    assert [entry['debt'].name for entry in ranked] == ['Debt 0', 'Debt 1', 'Debt 2', 'Debt 3']


def test_rank_by_priority_zero_maxima_give_zero_terms():
    debts = [make_debt('A', total_amount=1000), make_debt('B', total_amount=500)]
    ranked = analytics.rank_by_priority(debts)
    assert ranked[0]['priority_score'] == pytest.approx(0.40)
    assert ranked[1]['priority_score'] == pytest.approx(0.20)


def test_rank_by_priority_empty():
    assert analytics.rank_by_priority([]) == []
    assert analytics.priority_debts([]) == []


def test_priority_debts_top_five():
    debts = [make_debt(f'Debt {i}', total_amount=1000 * (i + 1), monthly_payment=100) for i in range(8)]
    top = analytics.priority_debts(debts)
    assert len(top) == 5
    assert [entry['debt'].name for entry in top] == ['Debt 7', 'Debt 6', 'Debt 5', 'Debt 4', 'Debt 3']


# Interest

def test_interest_accrued_example():
    """12000 loan, 1000/month, 12% p.a., six months in, 3000 paid"""
    debt = make_debt(total_amount=12000, monthly_payment=1000, interest_rate=12,
                     date_of_loan=TODAY - timedelta(days=190), total_paid=3000)

    assert analytics.months_elapsed(debt.date_of_loan, TODAY) == 6
    assert analytics.compute_overdue_amount(debt, TODAY) == pytest.approx(3000)
    assert analytics.compute_interest_accrued(debt, TODAY) == pytest.approx(180)


def test_interest_accrued_zero_without_rate_or_payment():
    long_ago = TODAY - timedelta(days=1000)
    assert analytics.compute_interest_accrued(
        make_debt(total_amount=12000, monthly_payment=1000, interest_rate=0, date_of_loan=long_ago), TODAY) == 0
    assert analytics.compute_interest_accrued(
        make_debt(total_amount=12000, monthly_payment=0, interest_rate=12, date_of_loan=long_ago), TODAY) == 0


def test_interest_accrued_zero_when_up_to_date():
    debt = make_debt(total_amount=12000, monthly_payment=1000, interest_rate=12,
                     date_of_loan=TODAY - timedelta(days=190), total_paid=6000)
    assert analytics.compute_interest_accrued(debt, TODAY) == 0


def test_interest_accrued_future_loan_date():
    debt = make_debt(total_amount=12000, monthly_payment=1000, interest_rate=12,
                     date_of_loan=TODAY + timedelta(days=90))
    assert analytics.months_elapsed(debt.date_of_loan, TODAY) == 0
    assert analytics.compute_interest_accrued(debt, TODAY) == 0


def test_months_elapsed_uses_average_month_length():
    assert analytics.months_elapsed(TODAY - timedelta(days=30), TODAY) == 0
    assert analytics.months_elapsed(TODAY - timedelta(days=31), TODAY) == 1
    assert analytics.months_elapsed('2025-01-01', TODAY) == 1


def test_current_interest_projection():
    debt = make_debt(total_amount=12000, total_paid=2000, interest_rate=12)
    projection = analytics.compute_current_interest_projection(debt)
    assert projection['monthly_interest'] == pytest.approx(100)
    assert projection['annual_interest'] == pytest.approx(1200)


def test_current_interest_projection_paid_or_interest_free():
    paid = make_debt(total_amount=1000, total_paid=1000, interest_rate=12)
    free = make_debt(total_amount=1000, interest_rate=0)
    for debt in (paid, free):
        assert analytics.compute_current_interest_projection(debt) == {
            'monthly_interest': 0.0, 'annual_interest': 0.0}


# Portfolio aggregates

def test_aggregate_portfolio_empty():
    result = analytics.aggregate_portfolio([], TODAY)
    assert result['highest_debt'] is None
    for key, value in result.items():
        if key != 'highest_debt':
            assert value == 0, key


def test_aggregate_portfolio_totals():
    overdue = make_debt('Card', total_amount=12000, monthly_payment=1000, interest_rate=12,
                        date_of_loan=TODAY - timedelta(days=190), total_paid=3000)
    paid = make_debt('Phone', total_amount=2000, total_paid=2000)
    open_debt = make_debt('Family', total_amount=6000, total_paid=0)

    result = analytics.aggregate_portfolio([overdue, paid, open_debt], TODAY)

    assert result['total_debt'] == 20000
    assert result['total_paid'] == 5000
    assert result['remaining_debt'] == 15000
    assert result['completed_count'] == 1
    assert result['active_count'] == 2
    assert result['average_progress'] == pytest.approx(25)
    assert result['highest_debt'] is overdue
    assert result['overdue_count'] == 1
    assert result['total_interest_accrued'] == pytest.approx(180)
    assert result['monthly_interest'] == pytest.approx(90)
    assert result['annual_interest'] == pytest.approx(1080)


def test_aggregate_portfolio_highest_debt_tie_keeps_first():
    first = make_debt('First', total_amount=5000)
    second = make_debt('Second', total_amount=5000)
    assert analytics.aggregate_portfolio([first, second], TODAY)['highest_debt'] is first


def test_estimate_debt_free_date_takes_longest_horizon():
    debts = [
        make_debt(total_amount=1000, monthly_payment=100),   # 10 months
        make_debt(total_amount=1400, monthly_payment=100),   # 14 months
        make_debt(total_amount=9000, monthly_payment=0),     # unspecified
    ]
    assert analytics.estimate_debt_free_date(debts, TODAY) == date(2026, 5, 1)


def test_estimate_debt_free_date_undefined_without_payments():
    assert analytics.estimate_debt_free_date([make_debt(monthly_payment=0)], TODAY) is None
    assert analytics.estimate_debt_free_date([], TODAY) is None


def test_dashboard_summary():
    debts = [make_debt(total_amount=1000, monthly_payment=100),
             make_debt(total_amount=3000, monthly_payment=250)]
    summary = analytics.dashboard_summary(debts, TODAY)
    assert summary['debt_count'] == 2
    assert summary['total_monthly_payment'] == 350
    assert summary['months_until_debt_free'] == 12
    assert summary['estimated_debt_free_date'] == date(2026, 3, 1)
    assert summary['total_debt'] == 4000


# Paid debts

def test_paid_debt_stats():
    debts = [
        make_debt('A', total_amount=1000, total_paid=1100, date_of_loan=date(2025, 1, 1),
                  last_payment_date=date(2025, 2, 10)),
        make_debt('B', total_amount=3000, total_paid=3000, date_of_loan=date(2024, 12, 1),
                  last_payment_date=date(2025, 1, 30)),
        make_debt('C', total_amount=5000, total_paid=100),
    ]
    stats = analytics.paid_debt_stats(debts, TODAY)

    assert stats['count'] == 2
    assert stats['total_cleared'] == 4000
    assert stats['total_paid'] == 4100
    assert stats['total_overpaid'] == 100
    assert stats['average_debt_size'] == 2000
    assert stats['average_days_to_pay'] == pytest.approx((40 + 60) / 2)


def test_paid_debt_stats_empty():
    stats = analytics.paid_debt_stats([make_debt(total_paid=0)], TODAY)
    assert stats['count'] == 0
    assert stats['average_debt_size'] == 0
    assert stats['average_days_to_pay'] == 0


@pytest.mark.parametrize('days, expected', [
    (1, '1 day'),
    (12, '12 days'),
    (45, '2 months'),
    (40, '1 month'),
    (365, '1 year'),
    (380, '1y 1m'),
    (800, '2y 2m'),
])
def test_format_time_to_pay(days, expected):
    assert analytics.format_time_to_pay(days) == expected


@pytest.mark.parametrize('days, expected', [
    (12.4, '12 days'),
    (45, '2 months'),
    (365, '1 year'),
    (547.5, '1.5 years'),
    (730, '2 years'),
])
def test_format_average_time_to_pay(days, expected):
    assert analytics.format_average_time_to_pay(days) == expected


def test_sort_paid_debts():
    debts = [
        make_debt('b', total_amount=1000, total_paid=1300, last_payment_date=date(2025, 1, 5)),
        make_debt('A', total_amount=3000, total_paid=3000, last_payment_date=date(2025, 2, 5)),
        make_debt('c', total_amount=2000, total_paid=2100, last_payment_date=date(2024, 12, 5)),
    ]

    def names(sort_by, order='desc'):
        return [d.name for d in analytics.sort_paid_debts(debts, sort_by, order)]

    assert names('paid_date') == ['A', 'b', 'c']
    assert names('paid_date', 'asc') == ['c', 'b', 'A']
    assert names('name', 'asc') == ['A', 'b', 'c']
    assert names('amount') == ['A', 'c', 'b']
    assert names('total_paid', 'asc') == ['b', 'c', 'A']
    assert names('overpaid') == ['b', 'c', 'A']
    assert names('unknown') == names('paid_date')


# Listing helpers

def test_filter_debts_matches_name_creditor_description():
    debts = [
        make_debt('Car Loan', creditor='BPI'),
        make_debt('Credit Card', creditor='BDO', description='Travel purchases'),
        make_debt('Family'),
    ]
    assert [d.name for d in analytics.filter_debts(debts, 'bdo')] == ['Credit Card']
    assert [d.name for d in analytics.filter_debts(debts, 'TRAVEL')] == ['Credit Card']
    assert [d.name for d in analytics.filter_debts(debts, 'loan')] == ['Car Loan']
    assert [d.name for d in analytics.filter_debts(debts, 'car')] == ['Car Loan', 'Credit Card']
    assert len(analytics.filter_debts(debts, '')) == 3


def test_sort_for_display_unpaid_first_then_name():
    debts = [
        make_debt('zeta', total_amount=100, total_paid=100),
        make_debt('Beta'),
        make_debt('alpha'),
        make_debt('Able', total_amount=100, total_paid=200),
    ]
    assert [d.name for d in analytics.sort_for_display(debts)] == ['alpha', 'Beta', 'Able', 'zeta']


def test_functions_are_idempotent():
    debt = make_debt(total_amount=12000, monthly_payment=1000, interest_rate=12,
                     date_of_loan=TODAY - timedelta(days=190), total_paid=3000)
    debts = [debt, make_debt(total_amount=500, monthly_payment=50)]

    assert analytics.compute_remaining(debt) == analytics.compute_remaining(debt)
    assert analytics.compute_interest_accrued(debt, TODAY) == analytics.compute_interest_accrued(debt, TODAY)
    assert analytics.aggregate_portfolio(debts, TODAY) == analytics.aggregate_portfolio(debts, TODAY)
    first = [(e['debt'], e['priority_score']) for e in analytics.rank_by_priority(debts)]
    second = [(e['debt'], e['priority_score']) for e in analytics.rank_by_priority(debts)]
    assert first == second
