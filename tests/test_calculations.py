"""
Tests for the rental calculation engine.
"""

import math
from dataclasses import replace

import pytest
from rental_calc.calculations import CalculatorInputs, calculate_all
from rental_calc.calculations.amortization import (
    build_amortization,
    calculate_monthly_mortgage,
    calculate_total_interest,
    calculate_total_principal,
    floor_at_zero,
    iter_amortization,
    percent_to_decimal,
)
from rental_calc.calculations.metrics import (
    annualize_return,
    calculate_loan_amount,
    calculate_total_cash_invested,
)


class TestMortgagePayment:
    """Test monthly mortgage payment calculation."""

    def test_percent_to_decimal(self):
        assert percent_to_decimal(6.5) == pytest.approx(0.065)
        assert percent_to_decimal(0) == 0

    def test_thirty_year_known_payment(self):
        """$240k at 6.5% for 30 years is about $1,516.96/month."""
        payment = calculate_monthly_mortgage(240000, 6.5, 30)
        assert payment == pytest.approx(1516.96, abs=0.01)

    def test_zero_rate_is_straight_line(self):
        """With no interest the loan is repaid in equal parts."""
        payment = calculate_monthly_mortgage(120000, 0, 10)
        assert payment == 120000 / (10 * 12)

    def test_zero_loan(self):
        assert calculate_monthly_mortgage(0, 6.5, 30) == 0

    def test_zero_term_does_not_raise(self):
        """A zero-length term divides by zero and yields infinity."""
        assert math.isinf(calculate_monthly_mortgage(240000, 6.5, 0))
        assert math.isinf(calculate_monthly_mortgage(240000, 0, 0))

    def test_returns_plain_float(self):
        payment = calculate_monthly_mortgage(240000, 6.5, 30)
        assert type(payment) is float


class TestAmortization:
    """Test loan amortization schedule."""

    def test_schedule_length(self):
        """Schedule has one row per month of the term."""
        schedule = build_amortization(240000, 6.5, 30)
        assert len(schedule) == 360

    def test_months_are_sequential(self):
        schedule = build_amortization(100000, 5, 15)
        assert [row.month for row in schedule] == list(range(1, 181))

    def test_final_balance_is_zero(self):
        """Final balance should be very close to zero."""
        schedule = build_amortization(240000, 6.5, 30)
        assert schedule[-1].balance == pytest.approx(0, abs=1e-4)

    @pytest.mark.parametrize("rate", [0, 3.25, 6.5, 12])
    def test_principal_sums_to_loan(self, rate):
        """Principal repaid over the term equals the amount borrowed."""
        schedule = build_amortization(240000, rate, 30)
        assert calculate_total_principal(schedule) == pytest.approx(240000, rel=1e-9)

    @pytest.mark.parametrize(
        "loan_amount,rate,term_years",
        [(240000, 6.5, 30), (50000, 18, 5), (1000000, 0, 20), (75000, 2.75, 15)],
    )
    def test_balance_non_increasing_and_principal_non_negative(
        self, loan_amount, rate, term_years
    ):
        schedule = build_amortization(loan_amount, rate, term_years)
        previous_balance = loan_amount
        for row in schedule:
            assert row.principal >= 0
            assert row.balance >= 0
            assert row.balance <= previous_balance
            previous_balance = row.balance

    def test_zero_rate_has_no_interest(self):
        schedule = build_amortization(120000, 0, 10)
        assert all(row.interest == 0 for row in schedule)
        assert all(row.principal == 1000 for row in schedule)
        assert schedule[-1].balance == 0

    def test_first_period_split(self):
        """First month: interest on the full balance, the rest to principal."""
        row = build_amortization(240000, 6.5, 30)[0]
        assert row.interest == pytest.approx(1300.0)
        assert row.principal == pytest.approx(216.96, abs=0.01)
        assert row.balance == pytest.approx(240000 - row.principal)

    def test_total_interest(self):
        schedule = build_amortization(240000, 6.5, 30)
        payment = calculate_monthly_mortgage(240000, 6.5, 30)
        assert calculate_total_interest(schedule) == pytest.approx(
            payment * 360 - 240000, abs=0.01
        )

    def test_iterator_is_lazy_and_recomputable(self):
        """Each call starts a fresh schedule from the full loan amount."""
        rows = iter_amortization(240000, 6.5, 30)
        first = next(rows)
        second = next(rows)
        assert (first.month, second.month) == (1, 2)

        again = next(iter_amortization(240000, 6.5, 30))
        assert again == first

    def test_fractional_term_stops_at_last_whole_month(self):
        assert len(build_amortization(100000, 5, 2.5)) == 30

    def test_zero_term_is_empty(self):
        assert build_amortization(240000, 6.5, 0) == []

    def test_floor_at_zero(self):
        assert floor_at_zero(-5.0) == 0
        assert floor_at_zero(5.0) == 5.0
        assert math.isnan(floor_at_zero(math.nan))


class TestCalculateAll:
    """Test the full metrics pipeline on the default scenario."""

    def test_loan_and_mortgage(self, default_inputs):
        result = calculate_all(default_inputs)
        assert result.loan_amount == 240000
        assert result.monthly_mortgage == pytest.approx(1516.96, abs=0.01)

    def test_noi_excludes_mortgage(self, default_inputs):
        """NOI = 2400 - (300 + 120 + 0 + 120 + 120 + 192)."""
        result = calculate_all(default_inputs)
        assert result.noi_monthly == pytest.approx(1548)
        assert result.noi_annual == pytest.approx(18576)

    def test_expense_breakdown_includes_mortgage(self, default_inputs):
        result = calculate_all(default_inputs)
        expenses = result.expense_breakdown_monthly
        assert expenses.variable == pytest.approx(432)
        assert expenses.fixed == pytest.approx(420 + result.monthly_mortgage)
        assert expenses.total == pytest.approx(expenses.fixed + expenses.variable)

    def test_cash_flow_is_after_debt_service(self, default_inputs):
        result = calculate_all(default_inputs)
        assert result.cash_flow_monthly == pytest.approx(31.04, abs=0.01)
        assert result.cash_flow_monthly == pytest.approx(
            result.noi_monthly - result.monthly_mortgage
        )

    def test_cap_rate(self, default_inputs):
        result = calculate_all(default_inputs)
        assert result.cap_rate_percent == pytest.approx(6.192)

    def test_cash_on_cash(self, default_inputs):
        """Cash invested is 60,000 down plus 6,000 closing costs."""
        assert calculate_total_cash_invested(default_inputs) == pytest.approx(66000)
        result = calculate_all(default_inputs)
        expected = result.cash_flow_monthly * 12 / 66000 * 100
        assert result.cash_on_cash_return_percent == pytest.approx(expected)
        assert result.cash_on_cash_return_percent == pytest.approx(0.564, abs=0.001)

    def test_five_year_annualized_return(self, default_inputs):
        """Cash flow plus 60 months of principal paydown, compounded annually."""
        result = calculate_all(default_inputs)
        principal_paid = sum(row.principal for row in result.amortization[:60])
        profit = result.cash_flow_monthly * 12 * 5 + principal_paid
        expected = ((1 + profit / 66000) ** (1 / 5) - 1) * 100

        assert result.annualized_five_year_return_percent == pytest.approx(expected)
        assert 4.5 < result.annualized_five_year_return_percent < 5.0

    def test_amortization_included(self, default_inputs):
        result = calculate_all(default_inputs)
        assert len(result.amortization) == 360

    def test_deterministic(self, default_inputs):
        assert calculate_all(default_inputs) == calculate_all(default_inputs)


class TestDegenerateInputs:
    """Zero-guards and IEEE behavior for edge-case inputs."""

    def test_zero_purchase_price(self, default_inputs):
        inputs = replace(default_inputs, purchase_price=0)
        result = calculate_all(inputs)
        assert result.cap_rate_percent == 0
        assert result.loan_amount == 0

    def test_zero_cash_invested(self, default_inputs):
        inputs = replace(
            default_inputs, down_payment_percent=0, closing_costs=0, rehab_budget=0
        )
        assert calculate_total_cash_invested(inputs) == 0
        result = calculate_all(inputs)
        assert result.cash_on_cash_return_percent == 0
        assert result.annualized_five_year_return_percent == 0

    def test_down_payment_over_price_floors_loan(self, default_inputs):
        inputs = replace(default_inputs, down_payment_percent=120)
        assert calculate_loan_amount(inputs) == 0
        assert calculate_all(inputs).monthly_mortgage == 0

    def test_short_term_uses_whole_schedule_for_five_years(self, default_inputs):
        """A 3-year loan is fully repaid inside the 5-year window."""
        inputs = replace(default_inputs, loan_term_years=3)
        result = calculate_all(inputs)
        assert len(result.amortization) == 36
        principal_paid = sum(row.principal for row in result.amortization)
        assert principal_paid == pytest.approx(240000)

    def test_loss_beyond_investment_is_nan(self):
        """Losing more than the cash invested has no real annualized rate."""
        inputs = CalculatorInputs(
            purchase_price=100000,
            down_payment_percent=100,
            interest_rate_annual_percent=6.5,
            loan_term_years=30,
            monthly_rent=0,
            vacancy_percent=0,
            maintenance_percent=0,
            management_percent=0,
            taxes_monthly=5000,
            insurance_monthly=0,
            other_fixed_monthly=0,
            closing_costs=0,
            rehab_budget=0,
        )
        result = calculate_all(inputs)
        assert result.cash_on_cash_return_percent == pytest.approx(-60)
        assert isinstance(result.annualized_five_year_return_percent, float)
        assert math.isnan(result.annualized_five_year_return_percent)

    def test_zero_term_does_not_raise(self, default_inputs):
        inputs = replace(default_inputs, loan_term_years=0)
        result = calculate_all(inputs)
        assert result.amortization == []
        assert math.isinf(result.monthly_mortgage)
        assert result.noi_monthly == pytest.approx(1548)

    def test_nan_input_propagates(self, default_inputs):
        inputs = replace(default_inputs, monthly_rent=math.nan)
        result = calculate_all(inputs)
        assert math.isnan(result.noi_monthly)
        assert math.isnan(result.cash_flow_monthly)


class TestAnnualizeReturn:
    """Test compound annual rate conversion."""

    def test_doubling_over_five_years(self):
        assert annualize_return(1.0, 5) == pytest.approx(2 ** 0.2 - 1)

    def test_no_gain(self):
        assert annualize_return(0.0, 5) == 0

    def test_total_loss(self):
        assert annualize_return(-1.0, 5) == -1
