"""
Tests for amortization and break-even calculations.
"""

import math
import pytest
from datetime import date

from resim.calculations.amortization import (
    calculate_annual_loan_payment,
    calculate_equal_principal_payment,
    calculate_first_month_payment,
    calculate_payment,
    calculate_remaining_balance,
    calculate_remaining_loan,
    calculate_total_interest,
    generate_amortization_schedule,
)
from resim.calculations.breakeven import (
    calculate_break_even_price,
    calculate_net_proceeds,
    calculate_selling_costs,
)
from resim.calculations.models import RepaymentMethod
from resim.calculations.numeric import floor_at_zero, ieee_divide, round_half_up

EI = RepaymentMethod.equal_installment
EP = RepaymentMethod.equal_principal


class TestPayment:
    """Test monthly payment calculation."""

    def test_calculate_payment(self):
        """27M at 1.5% over 35 years is about 82,700/month."""
        payment = calculate_payment(27_000_000, 1.5, 420)
        assert abs(payment - 82_700) < 100

    def test_calculate_payment_matches_annuity_formula(self):
        """1M at 6% over 30 years (Excel PMT gives 5,995.51)."""
        payment = calculate_payment(1_000_000, 6, 360)
        assert payment == pytest.approx(5995.505, abs=0.01)

    def test_zero_rate_payment(self):
        """Zero rate divides principal evenly."""
        assert calculate_payment(1_200_000, 0, 120) == 10_000

    def test_equal_principal_first_month(self):
        """Month 1 = P/M + P * monthly rate."""
        parts = calculate_equal_principal_payment(1_200_000, 6, 120, 1)
        assert parts.principal == 10_000
        assert parts.interest == pytest.approx(6_000)
        assert parts.total == pytest.approx(16_000)

    def test_first_month_payment_dispatch(self):
        assert calculate_first_month_payment(1_200_000, 6, 120, EI) == pytest.approx(
            calculate_payment(1_200_000, 6, 120)
        )
        assert calculate_first_month_payment(1_200_000, 6, 120, EP) == pytest.approx(16_000)

    def test_zero_term_does_not_raise(self):
        """A zero-month term gives a non-finite payment instead of an exception."""
        assert math.isinf(calculate_payment(1_000_000, 1.5, 0))
        assert math.isinf(calculate_payment(1_000_000, 0, 0))


class TestRemainingBalance:
    """Closed-form balances against a month-by-month schedule."""

    @pytest.mark.parametrize("principal", [100_000, 27_000_000])
    @pytest.mark.parametrize("annual_rate", [0, 1.5, 5, 10])
    @pytest.mark.parametrize("total_months", [12, 60, 420])
    def test_closed_form_matches_schedule(self, principal, annual_rate, total_months):
        schedule = generate_amortization_schedule(
            principal, annual_rate, total_months, EI, start_date=date(2025, 1, 1)
        )

        assert calculate_remaining_balance(principal, annual_rate, total_months, 0) == principal
        for row in schedule:
            closed = calculate_remaining_balance(
                principal, annual_rate, total_months, row["period"]
            )
            assert abs(closed - row["ending_balance"]) < 1

    @pytest.mark.parametrize("annual_rate", [0, 1.5, 5, 10])
    @pytest.mark.parametrize("total_months", [12, 60, 420])
    def test_fully_amortized_at_term(self, annual_rate, total_months):
        principal = 30_000_000
        assert abs(
            calculate_remaining_balance(principal, annual_rate, total_months, total_months)
        ) < 1
        years = total_months // 12
        assert calculate_remaining_loan(principal, annual_rate, total_months, years, EI) < 1
        assert calculate_remaining_loan(principal, annual_rate, total_months, years, EP) < 1

    def test_zero_rate_linear_decline(self):
        for k in range(0, 121):
            assert calculate_remaining_balance(1_200_000, 0, 120, k) == 1_200_000 - 10_000 * k

    def test_remaining_loan_after_term_is_zero(self):
        assert calculate_remaining_loan(1_000_000, 3, 120, 15, EI) == pytest.approx(0, abs=1e-6)
        assert calculate_remaining_loan(1_000_000, 3, 120, 15, EP) == 0

    def test_equal_principal_remaining_loan(self):
        # 2 years of 10,000/month
        assert calculate_remaining_loan(1_200_000, 6, 120, 2, EP) == pytest.approx(960_000)


class TestEqualPrincipal:
    """Test equal-principal repayment properties."""

    @pytest.mark.parametrize("annual_rate", [1.5, 5, 10])
    def test_constant_principal_declining_interest(self, annual_rate):
        principal, total_months = 30_000_000, 420
        previous = None
        for month in range(1, total_months + 1):
            parts = calculate_equal_principal_payment(principal, annual_rate, total_months, month)
            assert parts.principal == principal / total_months
            if previous is not None:
                assert parts.interest < previous.interest
                assert parts.total < previous.total
            previous = parts

    def test_zero_rate_has_no_interest(self):
        for month in range(1, 61):
            parts = calculate_equal_principal_payment(600_000, 0, 60, month)
            assert parts.interest == 0
            assert parts.total == 10_000

    def test_schedule_matches_primitives(self):
        schedule = generate_amortization_schedule(1_200_000, 6, 120, EP, start_date=date(2025, 1, 1))
        for row in schedule:
            parts = calculate_equal_principal_payment(1_200_000, 6, 120, row["period"])
            assert row["interest"] == pytest.approx(parts.interest)
            assert row["payment"] == pytest.approx(parts.total)
        assert abs(schedule[-1]["ending_balance"]) < 1e-6


class TestAnnualLoanPayment:
    """Test yearly aggregation of monthly payments."""

    @pytest.mark.parametrize("method", [EI, EP])
    def test_matches_schedule_sums(self, method):
        schedule = generate_amortization_schedule(27_000_000, 1.5, 420, method)
        for year in (1, 2, 18, 35):
            rows = schedule[(year - 1) * 12 : year * 12]
            annual = calculate_annual_loan_payment(27_000_000, 1.5, 420, year, method)
            assert annual.total_payment == pytest.approx(sum(r["payment"] for r in rows))
            assert annual.interest_payment == pytest.approx(sum(r["interest"] for r in rows))
            assert annual.principal_payment == pytest.approx(sum(r["principal"] for r in rows))

    @pytest.mark.parametrize("method", [EI, EP])
    def test_principal_sums_to_loan(self, method):
        total = sum(
            calculate_annual_loan_payment(5_000_000, 2.5, 240, year, method).principal_payment
            for year in range(1, 21)
        )
        assert total == pytest.approx(5_000_000)

    @pytest.mark.parametrize("method", [EI, EP])
    def test_years_after_term_are_zero(self, method):
        annual = calculate_annual_loan_payment(1_000_000, 3, 120, 11, method)
        assert annual.total_payment == 0
        assert annual.principal_payment == 0
        assert annual.interest_payment == 0

    def test_partial_final_year(self):
        """An 18-month loan only has 6 payments in year 2."""
        annual = calculate_annual_loan_payment(18_000, 0, 18, 2, EP)
        assert annual.total_payment == pytest.approx(6_000)
        annual = calculate_annual_loan_payment(18_000, 0, 18, 2, EI)
        assert annual.total_payment == pytest.approx(6_000)

    def test_equal_installment_total_is_twelve_payments(self):
        payment = calculate_payment(27_000_000, 1.5, 420)
        annual = calculate_annual_loan_payment(27_000_000, 1.5, 420, 1, EI)
        assert annual.total_payment == pytest.approx(payment * 12)
        assert annual.principal_payment + annual.interest_payment == pytest.approx(
            annual.total_payment
        )

    def test_total_interest(self):
        schedule = generate_amortization_schedule(1_200_000, 0, 120, EI)
        assert calculate_total_interest(schedule) == 0


class TestBreakEven:
    """Test sale and break-even calculations."""

    @pytest.mark.parametrize("remaining_loan", [0, 1_000_000, 26_500_000])
    @pytest.mark.parametrize("net_cash", [0, 4_766_000])
    @pytest.mark.parametrize("rate", [0, 3, 50, 99.5])
    @pytest.mark.parametrize("fixed,other", [(0, 0), (60_000, 0), (60_000, 250_000)])
    def test_break_even_identity(self, remaining_loan, net_cash, rate, fixed, other):
        price = calculate_break_even_price(remaining_loan, net_cash, rate, fixed, other)
        residual = price * (1 - rate / 100) - fixed - other - remaining_loan - net_cash
        assert residual == pytest.approx(0, abs=1e-4)

    def test_break_even_example(self):
        price = calculate_break_even_price(26_000_000, 4_000_000, 3, 60_000, 0)
        assert price == pytest.approx(30_060_000 / 0.97)

    def test_break_even_not_clamped(self):
        """Negative inputs give a negative price; clamping is the caller's job."""
        assert calculate_break_even_price(0, -1_000_000, 3, 60_000, 0) < 0

    def test_full_agent_fee_rate_is_infinite(self):
        assert math.isinf(calculate_break_even_price(1_000_000, 0, 100, 60_000, 0))

    def test_selling_costs(self):
        assert calculate_selling_costs(30_000_000, 3, 60_000, 0) == pytest.approx(960_000)
        assert calculate_selling_costs(0, 3, 60_000, 10_000) == 70_000

    def test_net_proceeds(self):
        assert calculate_net_proceeds(30_000_000, 960_000, 26_000_000) == 3_040_000

    def test_selling_at_break_even_recovers_cash(self):
        price = calculate_break_even_price(20_000_000, 3_000_000, 3, 60_000, 5_000)
        costs = calculate_selling_costs(price, 3, 60_000, 5_000)
        assert calculate_net_proceeds(price, costs, 20_000_000) == pytest.approx(3_000_000)


class TestNumeric:
    """Test rounding and division helpers."""

    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(-2.5) == -2
        assert round_half_up(0.5) == 1
        assert round_half_up(4.8, 2) == 4.8
        assert round_half_up(3.278666, 2) == 3.28

    def test_round_half_up_keeps_non_finite(self):
        assert math.isnan(round_half_up(float("nan")))
        assert round_half_up(float("inf")) == float("inf")

    def test_ieee_divide(self):
        assert ieee_divide(1, 4) == 0.25
        assert ieee_divide(1, 0) == float("inf")
        assert ieee_divide(-1, 0) == float("-inf")
        assert math.isnan(ieee_divide(0, 0))

    def test_floor_at_zero(self):
        assert floor_at_zero(-5) == 0
        assert floor_at_zero(5) == 5
        assert math.isnan(floor_at_zero(float("nan")))
