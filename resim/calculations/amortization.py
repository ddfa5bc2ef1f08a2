"""
Loan Amortization Calculations

Monthly payment, principal/interest split and outstanding balance for the
two supported repayment methods:

- equal_installment: fixed total payment each month (standard annuity).
- equal_principal: fixed principal each month, interest on the declining
  balance, so the total payment shrinks over time.

Annual interest rates are percentages (1.5 means 1.5%). Months are 1-based.
"""

from typing import List, Dict, NamedTuple, Optional
from datetime import date
from dateutil.relativedelta import relativedelta

from resim.calculations.models import RepaymentMethod
from resim.calculations.numeric import floor_at_zero, ieee_divide


class MonthlyPayment(NamedTuple):
    total: float
    principal: float
    interest: float


class AnnualLoanPayment(NamedTuple):
    total_payment: float
    principal_payment: float
    interest_payment: float


def monthly_rate(annual_rate: float) -> float:
    """Convert an annual percentage rate to a monthly decimal rate."""
    return annual_rate / 100 / 12


def calculate_payment(
    principal: float, annual_rate: float, total_months: int
) -> float:
    """
    Calculate the equal-installment monthly payment.

    Matches Excel's PMT() function (sign flipped to positive).

    Args:
        principal: Loan principal amount
        annual_rate: Annual interest rate in percent (e.g., 1.5 for 1.5%)
        total_months: Total repayment period in months

    Returns:
        Monthly payment amount
    """
    if annual_rate == 0:
        return ieee_divide(principal, total_months)

    r = monthly_rate(annual_rate)
    growth = (1 + r) ** total_months

    return ieee_divide(principal * r * growth, growth - 1)


def calculate_remaining_balance(
    principal: float,
    annual_rate: float,
    total_months: int,
    months_paid: int,
) -> float:
    """Closed-form equal-installment balance after `months_paid` payments."""
    if annual_rate == 0:
        return principal - ieee_divide(principal, total_months) * months_paid

    r = monthly_rate(annual_rate)
    payment = calculate_payment(principal, annual_rate, total_months)
    growth = (1 + r) ** months_paid

    return principal * growth - payment * (growth - 1) / r


def calculate_equal_principal_payment(
    principal: float,
    annual_rate: float,
    total_months: int,
    month: int,
) -> MonthlyPayment:
    """
    Calculate the equal-principal payment for a given month.

    Args:
        principal: Loan principal amount
        annual_rate: Annual interest rate in percent
        total_months: Total repayment period in months
        month: Month number (1-based)

    Returns:
        MonthlyPayment with total, principal and interest portions
    """
    principal_part = ieee_divide(principal, total_months)
    remaining_at_start = principal - principal_part * (month - 1)
    interest_part = remaining_at_start * monthly_rate(annual_rate)

    return MonthlyPayment(principal_part + interest_part, principal_part, interest_part)


def calculate_first_month_payment(
    principal: float,
    annual_rate: float,
    total_months: int,
    method: RepaymentMethod,
) -> float:
    """Total payment due in month 1 under the given method."""
    if method == RepaymentMethod.equal_installment:
        return calculate_payment(principal, annual_rate, total_months)
    return calculate_equal_principal_payment(
        principal, annual_rate, total_months, 1
    ).total


def calculate_annual_loan_payment(
    principal: float,
    annual_rate: float,
    total_months: int,
    year: int,
    method: RepaymentMethod,
) -> AnnualLoanPayment:
    """
    Sum payments for months ((year-1)*12+1 .. year*12), clipped to the term.

    Years that begin after the final month return all-zero totals, so the
    simulation horizon can run past the loan term.
    """
    start_month = (year - 1) * 12 + 1
    end_month = min(year * 12, total_months)

    if start_month > total_months:
        return AnnualLoanPayment(0.0, 0.0, 0.0)

    total_payment = 0.0
    principal_payment = 0.0
    interest_payment = 0.0

    if method == RepaymentMethod.equal_installment:
        payment = calculate_payment(principal, annual_rate, total_months)
        r = monthly_rate(annual_rate)

        for month in range(start_month, end_month + 1):
            balance_before = calculate_remaining_balance(
                principal, annual_rate, total_months, month - 1
            )
            interest = balance_before * r
            total_payment += payment
            principal_payment += payment - interest
            interest_payment += interest
    else:
        for month in range(start_month, end_month + 1):
            parts = calculate_equal_principal_payment(
                principal, annual_rate, total_months, month
            )
            total_payment += parts.total
            principal_payment += parts.principal
            interest_payment += parts.interest

    return AnnualLoanPayment(total_payment, principal_payment, interest_payment)


def calculate_remaining_loan(
    principal: float,
    annual_rate: float,
    total_months: int,
    year: int,
    method: RepaymentMethod,
) -> float:
    """Loan balance at the end of `year`, never below zero."""
    months_paid = min(year * 12, total_months)

    if method == RepaymentMethod.equal_installment:
        balance = calculate_remaining_balance(
            principal, annual_rate, total_months, months_paid
        )
    else:
        balance = principal - ieee_divide(principal, total_months) * months_paid

    return floor_at_zero(balance)


def generate_amortization_schedule(
    principal: float,
    annual_rate: float,
    total_months: int,
    method: RepaymentMethod = RepaymentMethod.equal_installment,
    start_date: Optional[date] = None,
) -> List[Dict]:
    """
    Generate a month-by-month amortization schedule.

    The balance is stepped forward one payment at a time rather than taken
    from the closed forms above, so the two can be checked against each other.

    Args:
        principal: Loan principal amount
        annual_rate: Annual interest rate in percent
        total_months: Total repayment period in months
        method: Repayment method
        start_date: Date of first payment

    Returns:
        List of schedule rows (values unrounded)
    """
    schedule = []
    balance = principal
    r = monthly_rate(annual_rate)

    if start_date is None:
        start_date = date.today()

    if method == RepaymentMethod.equal_installment:
        payment = calculate_payment(principal, annual_rate, total_months)

    for period in range(1, total_months + 1):
        period_date = start_date + relativedelta(months=period - 1)

        interest = balance * r
        if method == RepaymentMethod.equal_installment:
            principal_pmt = payment - interest
        else:
            principal_pmt = ieee_divide(principal, total_months)

        ending_balance = balance - principal_pmt

        schedule.append(
            {
                "period": period,
                "date": period_date.isoformat(),
                "beginning_balance": balance,
                "payment": principal_pmt + interest,
                "interest": interest,
                "principal": principal_pmt,
                "ending_balance": ending_balance,
            }
        )

        balance = ending_balance

    return schedule


def calculate_total_interest(schedule: List[Dict]) -> float:
    """Calculate total interest paid over the schedule."""
    return sum(row["interest"] for row in schedule)
