"""
Seed the database with a demo one-room condo investment.
Values are the dashboard's default form inputs.
"""
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from resim.calculations.models import (
    AnnualCosts,
    InitialCosts,
    LoanInfo,
    PropertyInfo,
    RealEstateProperty,
    RepaymentMethod,
    SellingCostConfig,
    StructureType,
)
from resim.calculations.simulation import run_simulation
from resim.db.database import SessionLocal, init_db
from resim.db.models import PropertyRecord

DEMO_NAME = "Minato-ku One Room"


def build_demo_property() -> RealEstateProperty:
    return RealEstateProperty(
        property=PropertyInfo(
            name=DEMO_NAME,
            purchase_price=30_000_000,
            monthly_rent=120_000,
            building_age=10,
            structure=StructureType.RC,
            floor_area=25,
            location="Minato-ku, Tokyo",
        ),
        loan=LoanInfo(
            loan_amount=27_000_000,
            interest_rate=1.5,
            loan_term_years=35,
            repayment_method=RepaymentMethod.equal_installment,
        ),
        initial_costs=InitialCosts(
            agent_fee=1_056_000,
            registration_fee=300_000,
            stamp_duty=10_000,
            acquisition_tax=300_000,
            other_costs=100_000,
        ),
        annual_costs=AnnualCosts(
            property_tax=80_000,
            management_fee=10_000,
            maintenance_reserve=8_000,
            insurance=20_000,
            vacancy_rate=5,
            pm_fee_rate=5,
        ),
        selling_costs=SellingCostConfig(
            agent_fee_rate=3,
            agent_fee_fixed=60_000,
            other_selling_costs=0,
        ),
    )


def main():
    init_db()
    db = SessionLocal()

    try:
        existing = (
            db.query(PropertyRecord)
            .filter(PropertyRecord.name == DEMO_NAME, PropertyRecord.is_deleted == False)
            .first()
        )
        if existing:
            print(f"Property '{DEMO_NAME}' already exists (ID: {existing.id})")
            return

        prop = build_demo_property()
        record = PropertyRecord.from_domain(prop)
        db.add(record)
        db.commit()
        print(f"Created property: {record.name} (ID: {record.id})")

        result = run_simulation(prop, strict=True)
        print(f"  Monthly payment: {result.monthly_payment}")
        print(f"  Gross yield:     {result.gross_yield}%")
        print(f"  Net yield:       {result.net_yield}%")
        print(f"  Break-even year: {result.break_even_year}")

    except Exception as e:
        db.rollback()
        print(f"Error: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
