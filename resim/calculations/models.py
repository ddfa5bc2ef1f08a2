"""
Simulation Input and Output Records

Immutable value records consumed and produced by the simulation engine.
All monetary amounts are in a single currency unit (e.g. yen); rates are
percentages (e.g. 1.5 for 1.5%).
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import List, Optional
import enum
import uuid


class RepaymentMethod(str, enum.Enum):
    """Loan repayment method."""
    equal_installment = "equal_installment"
    equal_principal = "equal_principal"


class StructureType(str, enum.Enum):
    """Building structural type."""
    RC = "RC"  # Reinforced concrete
    SRC = "SRC"  # Steel-reinforced concrete
    Steel = "Steel"
    Wood = "Wood"


def generate_uuid() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class PropertyInfo:
    """Purchase economics and physical description of a property."""

    purchase_price: float
    monthly_rent: float
    building_age: int = 0
    structure: StructureType = StructureType.RC
    floor_area: float = 0.0
    location: str = ""
    name: str = ""


@dataclass(frozen=True)
class LoanInfo:
    """Acquisition loan terms."""

    loan_amount: float
    interest_rate: float  # Annual, percent
    loan_term_years: int
    repayment_method: RepaymentMethod = RepaymentMethod.equal_installment

    @property
    def total_months(self) -> int:
        return self.loan_term_years * 12


@dataclass(frozen=True)
class InitialCosts:
    """One-time costs paid at purchase."""

    agent_fee: float = 0.0
    registration_fee: float = 0.0
    stamp_duty: float = 0.0
    acquisition_tax: float = 0.0
    other_costs: float = 0.0

    @property
    def total(self) -> float:
        return (
            self.agent_fee
            + self.registration_fee
            + self.stamp_duty
            + self.acquisition_tax
            + self.other_costs
        )


@dataclass(frozen=True)
class AnnualCosts:
    """
    Recurring operating costs.

    property_tax and insurance are yearly amounts; management_fee and
    maintenance_reserve are monthly. vacancy_rate is the percent of gross
    rent lost, pm_fee_rate the percent of collected rent paid to the
    property manager.
    """

    property_tax: float = 0.0
    management_fee: float = 0.0
    maintenance_reserve: float = 0.0
    insurance: float = 0.0
    vacancy_rate: float = 0.0
    pm_fee_rate: float = 0.0

    def fixed_annual_total(self) -> float:
        """Yearly costs that do not depend on rent collected."""
        return (
            self.property_tax
            + (self.management_fee + self.maintenance_reserve) * 12
            + self.insurance
        )


@dataclass(frozen=True)
class SellingCostConfig:
    """Costs incurred on sale: agent_fee_rate% of price + fixed fee + other."""

    agent_fee_rate: float = 3.0
    agent_fee_fixed: float = 60000.0
    other_selling_costs: float = 0.0


@dataclass(frozen=True)
class RealEstateProperty:
    """Everything the engine needs to simulate one property."""

    property: PropertyInfo
    loan: LoanInfo
    initial_costs: InitialCosts = field(default_factory=InitialCosts)
    annual_costs: AnnualCosts = field(default_factory=AnnualCosts)
    selling_costs: SellingCostConfig = field(default_factory=SellingCostConfig)
    id: str = field(default_factory=generate_uuid)
    created_at: datetime = field(default_factory=_utcnow)

    @classmethod
    def from_dict(cls, data: dict) -> "RealEstateProperty":
        """
        Build from nested snake_case dicts (as stored or as dumped by the API).

        Missing id/created_at are generated.
        """
        info = dict(data["property"])
        if "structure" in info:
            info["structure"] = StructureType(info["structure"])
        loan = dict(data["loan"])
        if "repayment_method" in loan:
            loan["repayment_method"] = RepaymentMethod(loan["repayment_method"])

        extra = {}
        if data.get("id"):
            extra["id"] = data["id"]
        if data.get("created_at"):
            created_at = data["created_at"]
            if isinstance(created_at, str):
                created_at = datetime.fromisoformat(created_at)
            extra["created_at"] = created_at

        return cls(
            property=PropertyInfo(**info),
            loan=LoanInfo(**loan),
            initial_costs=InitialCosts(**data.get("initial_costs", {})),
            annual_costs=AnnualCosts(**data.get("annual_costs", {})),
            selling_costs=SellingCostConfig(**data.get("selling_costs", {})),
            **extra,
        )

    def to_dict(self) -> dict:
        data = asdict(self)
        data["property"]["structure"] = StructureType(self.property.structure).value
        data["loan"]["repayment_method"] = RepaymentMethod(self.loan.repayment_method).value
        data["created_at"] = self.created_at.isoformat()
        return data


@dataclass(frozen=True)
class AnnualSimulationRow:
    """One simulated year. Monetary fields are rounded to whole units."""

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

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class SimulationResult:
    """Summary scalars plus one row per simulated year (index = year - 1)."""

    down_payment: float
    total_initial_costs: float
    monthly_payment: float
    gross_yield: float
    net_yield: float
    annual_data: List[AnnualSimulationRow] = field(default_factory=list)
    break_even_year: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "down_payment": self.down_payment,
            "total_initial_costs": self.total_initial_costs,
            "monthly_payment": self.monthly_payment,
            "gross_yield": self.gross_yield,
            "net_yield": self.net_yield,
            "break_even_year": self.break_even_year,
            "annual_data": [row.to_dict() for row in self.annual_data],
        }
