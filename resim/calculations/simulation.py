"""
Investment Simulation

Projects a property's cash flows year by year over max(loan term, 35) years.
Each year depends on the cumulative cash flow of all previous years, so the
loop is written as a fold: simulate_year() takes the incoming state and
returns the year's row together with the outgoing state.

The engine does not validate by default. Degenerate inputs (zero purchase
price, zero loan term, a 100% agent fee rate) produce NaN or infinite values
in the output rather than an exception. Pass strict=True to run_simulation()
to reject such inputs up front with SimulationInputError.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from resim.calculations.amortization import (
    calculate_annual_loan_payment,
    calculate_first_month_payment,
    calculate_remaining_loan,
)
from resim.calculations.breakeven import (
    calculate_break_even_price,
    calculate_net_proceeds,
    calculate_selling_costs,
)
from resim.calculations.models import (
    AnnualSimulationRow,
    RealEstateProperty,
    RepaymentMethod,
    SimulationResult,
)
from resim.calculations.numeric import floor_at_zero, ieee_divide, round_half_up

logger = logging.getLogger(__name__)

MIN_SIMULATION_YEARS = 35


class SimulationInputError(ValueError):
    """Raised in strict mode when a property's inputs cannot be simulated."""

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__("; ".join(errors))


@dataclass(frozen=True)
class SimulationState:
    """Accumulator carried from one simulated year to the next."""

    year: int
    cumulative_cash_flow: float


def validate_property(prop: RealEstateProperty) -> None:
    """
    Check that a property can be simulated meaningfully.

    Raises:
        SimulationInputError: listing every violated constraint
    """
    errors = []
    info, loan = prop.property, prop.loan

    if not info.purchase_price > 0:
        errors.append("purchase_price must be greater than 0")
    if info.monthly_rent < 0:
        errors.append("monthly_rent must not be negative")
    if loan.loan_amount < 0:
        errors.append("loan_amount must not be negative")
    elif loan.loan_amount > info.purchase_price:
        errors.append("loan_amount must not exceed purchase_price")
    if loan.interest_rate < 0:
        errors.append("interest_rate must not be negative")
    if loan.loan_term_years < 1:
        errors.append("loan_term_years must be at least 1")

    for name in ("agent_fee", "registration_fee", "stamp_duty", "acquisition_tax", "other_costs"):
        if getattr(prop.initial_costs, name) < 0:
            errors.append(f"initial_costs.{name} must not be negative")

    annual = prop.annual_costs
    for name in ("property_tax", "management_fee", "maintenance_reserve", "insurance"):
        if getattr(annual, name) < 0:
            errors.append(f"annual_costs.{name} must not be negative")
    for name in ("vacancy_rate", "pm_fee_rate"):
        if not 0 <= getattr(annual, name) <= 100:
            errors.append(f"annual_costs.{name} must be between 0 and 100")

    selling = prop.selling_costs
    if not 0 <= selling.agent_fee_rate < 100:
        errors.append("selling_costs.agent_fee_rate must be at least 0 and below 100")
    if selling.agent_fee_fixed < 0:
        errors.append("selling_costs.agent_fee_fixed must not be negative")
    if selling.other_selling_costs < 0:
        errors.append("selling_costs.other_selling_costs must not be negative")

    if errors:
        raise SimulationInputError(errors)


def calculate_down_payment(prop: RealEstateProperty) -> float:
    return prop.property.purchase_price - prop.loan.loan_amount


def calculate_initial_investment(prop: RealEstateProperty) -> float:
    """Own cash paid at purchase: down payment plus one-time costs."""
    return calculate_down_payment(prop) + prop.initial_costs.total


def calculate_rental_income(prop: RealEstateProperty) -> float:
    """Annual rent actually collected (after vacancy)."""
    vacancy_rate = prop.annual_costs.vacancy_rate
    return prop.property.monthly_rent * 12 * (1 - vacancy_rate / 100)


def calculate_annual_expenses(prop: RealEstateProperty, rental_income: float) -> float:
    """Operating expenses excluding debt service; PM fee is on collected rent."""
    pm_fee = rental_income * (prop.annual_costs.pm_fee_rate / 100)
    return prop.annual_costs.fixed_annual_total() + pm_fee


def calculate_gross_yield(prop: RealEstateProperty) -> float:
    """Nominal full-occupancy rent over purchase price, in percent."""
    annual_rent = prop.property.monthly_rent * 12
    return ieee_divide(annual_rent, prop.property.purchase_price) * 100


def calculate_net_yield(prop: RealEstateProperty) -> float:
    """Collected rent less operating expenses over purchase price, in percent."""
    rental_income = calculate_rental_income(prop)
    expenses = calculate_annual_expenses(prop, rental_income)
    return ieee_divide(rental_income - expenses, prop.property.purchase_price) * 100


def initial_state(prop: RealEstateProperty) -> SimulationState:
    """State before year 1: the investor is down by the full initial outlay."""
    return SimulationState(year=0, cumulative_cash_flow=-calculate_initial_investment(prop))


def simulate_year(
    prop: RealEstateProperty, state: SimulationState
) -> Tuple[AnnualSimulationRow, SimulationState]:
    """
    Simulate the year following `state`.

    Args:
        prop: Property being simulated
        state: State at the end of the previous year

    Returns:
        (row for year state.year + 1, state at the end of that year)
    """
    info, loan, selling = prop.property, prop.loan, prop.selling_costs
    year = state.year + 1
    total_months = loan.total_months
    initial_investment = calculate_initial_investment(prop)

    rental_income = calculate_rental_income(prop)

    loan_result = calculate_annual_loan_payment(
        loan.loan_amount,
        loan.interest_rate,
        total_months,
        year,
        loan.repayment_method,
    )

    expenses = calculate_annual_expenses(prop, rental_income)

    net_cash_flow = rental_income - loan_result.total_payment - expenses
    cumulative_cash_flow = state.cumulative_cash_flow + net_cash_flow

    remaining_loan = calculate_remaining_loan(
        loan.loan_amount,
        loan.interest_rate,
        total_months,
        year,
        loan.repayment_method,
    )

    # Initial outlay plus any operating shortfall accumulated since
    total_cash_invested = initial_investment - min(cumulative_cash_flow + initial_investment, 0)

    net_cash_invested = floor_at_zero(-cumulative_cash_flow)
    break_even_price = calculate_break_even_price(
        remaining_loan,
        net_cash_invested,
        selling.agent_fee_rate,
        selling.agent_fee_fixed,
        selling.other_selling_costs,
    )

    # Reference scenario: sold at the original purchase price
    selling_costs_amount = calculate_selling_costs(
        info.purchase_price,
        selling.agent_fee_rate,
        selling.agent_fee_fixed,
        selling.other_selling_costs,
    )
    net_proceeds = calculate_net_proceeds(
        info.purchase_price, selling_costs_amount, remaining_loan
    )
    estimated_profit = net_proceeds + cumulative_cash_flow

    row = AnnualSimulationRow(
        year=year,
        rental_income=round_half_up(rental_income),
        loan_payment=round_half_up(loan_result.total_payment),
        principal_payment=round_half_up(loan_result.principal_payment),
        interest_payment=round_half_up(loan_result.interest_payment),
        annual_expenses=round_half_up(expenses),
        net_cash_flow=round_half_up(net_cash_flow),
        cumulative_cash_flow=round_half_up(cumulative_cash_flow),
        remaining_loan=round_half_up(floor_at_zero(remaining_loan)),
        total_cash_invested=round_half_up(total_cash_invested),
        break_even_price=round_half_up(floor_at_zero(break_even_price)),
        estimated_profit=round_half_up(estimated_profit),
        selling_costs_amount=round_half_up(selling_costs_amount),
        net_proceeds=round_half_up(net_proceeds),
    )

    return row, SimulationState(year=year, cumulative_cash_flow=cumulative_cash_flow)


def find_break_even_year(
    annual_data: List[AnnualSimulationRow], purchase_price: float
) -> Optional[int]:
    """First year whose break-even price is at or below the purchase price."""
    for row in annual_data:
        if row.break_even_price <= purchase_price:
            return row.year
    return None


def run_simulation(
    prop: RealEstateProperty,
    strict: bool = False,
    min_years: int = MIN_SIMULATION_YEARS,
) -> SimulationResult:
    """
    Run the full simulation for a property.

    Args:
        prop: Property to simulate
        strict: Validate inputs first and raise SimulationInputError on failure
        min_years: Minimum horizon; the simulation covers
            max(loan_term_years, min_years) years

    Returns:
        SimulationResult with summary scalars and one row per year
    """
    if strict:
        try:
            validate_property(prop)
        except SimulationInputError as e:
            logger.warning(f"Rejected simulation input for property {prop.id}: {e}")
            raise

    loan = prop.loan
    sim_years = max(loan.loan_term_years, min_years)

    logger.debug(
        f"Simulating property {prop.id}: {sim_years} years, "
        f"{RepaymentMethod(loan.repayment_method).value}"
    )

    monthly_payment = calculate_first_month_payment(
        loan.loan_amount,
        loan.interest_rate,
        loan.total_months,
        loan.repayment_method,
    )

    annual_data = []
    state = initial_state(prop)
    for _ in range(sim_years):
        row, state = simulate_year(prop, state)
        annual_data.append(row)

    result = SimulationResult(
        down_payment=round_half_up(calculate_down_payment(prop)),
        total_initial_costs=round_half_up(prop.initial_costs.total),
        monthly_payment=round_half_up(monthly_payment),
        gross_yield=round_half_up(calculate_gross_yield(prop), 2),
        net_yield=round_half_up(calculate_net_yield(prop), 2),
        annual_data=annual_data,
        break_even_year=find_break_even_year(annual_data, prop.property.purchase_price),
    )

    if not _all_finite(result):
        logger.warning(
            f"Simulation for property {prop.id} produced non-finite values; "
            "check inputs"
        )

    return result


def _all_finite(result: SimulationResult) -> bool:
    scalars = [
        result.down_payment,
        result.total_initial_costs,
        result.monthly_payment,
        result.gross_yield,
        result.net_yield,
    ]
    for row in result.annual_data:
        scalars.extend(v for k, v in row.to_dict().items() if k != "year")
    return all(math.isfinite(v) for v in scalars)
