"""
Request and response schemas shared by the API routers.

Field names are camelCase on the wire (purchasePrice, loanTermYears, ...),
matching property records saved by the dashboard front end. snake_case names
are accepted on input as well.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from resim.calculations.models import (
    RealEstateProperty,
    RepaymentMethod,
    SimulationResult,
    StructureType,
)


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True


class PropertyInfoSchema(CamelModel):
    """Property purchase economics."""

    name: str = ""
    purchase_price: float
    monthly_rent: float
    building_age: int = 0
    structure: StructureType = StructureType.RC
    floor_area: float = 0.0
    location: str = ""


class LoanInfoSchema(CamelModel):
    """Loan terms. interest_rate is an annual percentage."""

    loan_amount: float
    interest_rate: float
    loan_term_years: int
    repayment_method: RepaymentMethod = RepaymentMethod.equal_installment


class InitialCostsSchema(CamelModel):
    agent_fee: float = 0.0
    registration_fee: float = 0.0
    stamp_duty: float = 0.0
    acquisition_tax: float = 0.0
    other_costs: float = 0.0


class AnnualCostsSchema(CamelModel):
    property_tax: float = 0.0
    management_fee: float = 0.0
    maintenance_reserve: float = 0.0
    insurance: float = 0.0
    vacancy_rate: float = 0.0
    pm_fee_rate: float = 0.0


class SellingCostsSchema(CamelModel):
    agent_fee_rate: float = 3.0
    agent_fee_fixed: float = 60000.0
    other_selling_costs: float = 0.0


class RealEstatePropertyInput(CamelModel):
    """A full property record as submitted by a client."""

    id: Optional[str] = None
    created_at: Optional[datetime] = None
    property: PropertyInfoSchema
    loan: LoanInfoSchema
    initial_costs: InitialCostsSchema = Field(default_factory=InitialCostsSchema)
    annual_costs: AnnualCostsSchema = Field(default_factory=AnnualCostsSchema)
    selling_costs: SellingCostsSchema = Field(default_factory=SellingCostsSchema)

    def to_domain(self) -> RealEstateProperty:
        return RealEstateProperty.from_dict(self.model_dump())


class PropertyResponse(RealEstatePropertyInput):
    """A stored property."""

    id: str
    updated_at: Optional[datetime] = None


class PropertyListResponse(CamelModel):
    """Response for listing properties."""

    properties: List[PropertyResponse]
    total: int


class AnnualSimulationRowResponse(CamelModel):
    """One simulated year."""

    year: int
    rental_income: float
    loan_payment: float
    principal_payment: float
    interest_payment: float
    annual_expenses: float
    net_cash_flow: float
    cumulative_cash_flow: float
    remaining_loan: float
    total_cash_invested: float
    break_even_price: float
    estimated_profit: float
    selling_costs_amount: float
    net_proceeds: float


class SimulationResponse(CamelModel):
    """Simulation summary and yearly rows."""

    down_payment: float
    total_initial_costs: float
    monthly_payment: float
    gross_yield: float
    net_yield: float
    break_even_year: Optional[int] = None
    annual_data: List[AnnualSimulationRowResponse]

    @classmethod
    def from_result(cls, result: SimulationResult) -> "SimulationResponse":
        return cls.model_validate(result.to_dict())
