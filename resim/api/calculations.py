"""
Calculation API endpoints.

Stateless: each request carries its full input and gets a full recompute.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import Field

from resim.api.schemas import (
    CamelModel,
    RealEstatePropertyInput,
    SimulationResponse,
)
from resim.calculations import amortization, breakeven
from resim.calculations.models import RealEstateProperty, RepaymentMethod
from resim.calculations.numeric import floor_at_zero
from resim.calculations.simulation import SimulationInputError, run_simulation
from resim.config import get_settings

router = APIRouter()


def simulate(prop: RealEstateProperty) -> SimulationResponse:
    """Run the engine with the configured strictness and horizon."""
    settings = get_settings()

    try:
        result = run_simulation(
            prop,
            strict=settings.strict_validation,
            min_years=settings.simulation_min_years,
        )
    except SimulationInputError as e:
        raise HTTPException(status_code=400, detail=e.errors)

    return SimulationResponse.from_result(result)


@router.post("/simulation", response_model=SimulationResponse)
async def calculate_simulation(inputs: RealEstatePropertyInput):
    """Simulate a property without storing it."""
    return simulate(inputs.to_domain())


class AmortizationInput(CamelModel):
    """Input for amortization calculation."""

    principal: float = Field(gt=0)
    annual_rate: float = Field(ge=0)
    loan_term_years: int = Field(ge=1)
    repayment_method: RepaymentMethod = RepaymentMethod.equal_installment
    start_date: Optional[date] = None


class AmortizationRowResponse(CamelModel):
    """One month of an amortization schedule."""

    period: int
    date: str
    beginning_balance: float
    payment: float
    interest: float
    principal: float
    ending_balance: float


class AmortizationResponse(CamelModel):
    """Monthly schedule plus loan totals, rounded to 2 decimals."""

    schedule: List[AmortizationRowResponse]
    monthly_payment: float
    total_interest: float
    total_principal: float


@router.post("/amortization", response_model=AmortizationResponse)
async def calculate_amortization(inputs: AmortizationInput):
    """Generate a monthly loan amortization schedule."""
    schedule = amortization.generate_amortization_schedule(
        principal=inputs.principal,
        annual_rate=inputs.annual_rate,
        total_months=inputs.loan_term_years * 12,
        method=inputs.repayment_method,
        start_date=inputs.start_date,
    )

    return AmortizationResponse(
        schedule=[
            AmortizationRowResponse(
                **{
                    key: round(value, 2) if isinstance(value, float) else value
                    for key, value in row.items()
                }
            )
            for row in schedule
        ],
        monthly_payment=round(schedule[0]["payment"], 2),
        total_interest=round(amortization.calculate_total_interest(schedule), 2),
        total_principal=round(sum(row["principal"] for row in schedule), 2),
    )


class BreakEvenInput(CamelModel):
    """Input for a single break-even price calculation."""

    remaining_loan: float = Field(ge=0)
    net_cash_invested: float
    agent_fee_rate: float = Field(default=3.0, ge=0, lt=100)
    agent_fee_fixed: float = Field(default=60000.0, ge=0)
    other_selling_costs: float = Field(default=0.0, ge=0)


class BreakEvenResponse(CamelModel):
    """Break-even sale price and the selling costs incurred at that price."""

    break_even_price: float
    selling_costs: float


@router.post("/break-even", response_model=BreakEvenResponse)
async def calculate_break_even(inputs: BreakEvenInput):
    """Solve for the sale price that recovers all cash invested."""
    price = breakeven.calculate_break_even_price(
        inputs.remaining_loan,
        floor_at_zero(inputs.net_cash_invested),
        inputs.agent_fee_rate,
        inputs.agent_fee_fixed,
        inputs.other_selling_costs,
    )
    price = floor_at_zero(price)

    return BreakEvenResponse(
        break_even_price=price,
        selling_costs=breakeven.calculate_selling_costs(
            price,
            inputs.agent_fee_rate,
            inputs.agent_fee_fixed,
            inputs.other_selling_costs,
        ),
    )
