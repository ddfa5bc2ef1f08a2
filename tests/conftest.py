"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from resim.main import app
from resim.db.database import get_db
from resim.db.models import Base, PropertyRecord  # noqa: F401 - registers tables
from resim.calculations.models import (
    AnnualCosts,
    InitialCosts,
    LoanInfo,
    PropertyInfo,
    RealEstateProperty,
    RepaymentMethod,
    SellingCostConfig,
)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")


# Create a shared test database engine
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"
test_engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


def override_get_db():
    """Override database dependency for testing."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


# Override the dependency globally for all tests
app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test and drop after."""
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def db_session():
    """Create database session for test setup."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


def make_property(
    purchase_price=30_000_000,
    monthly_rent=120_000,
    loan_amount=27_000_000,
    interest_rate=1.5,
    loan_term_years=35,
    repayment_method=RepaymentMethod.equal_installment,
    **overrides,
) -> RealEstateProperty:
    """Build a property from the dashboard's default inputs."""
    return RealEstateProperty(
        property=PropertyInfo(
            name="Test Condo",
            purchase_price=purchase_price,
            monthly_rent=monthly_rent,
        ),
        loan=LoanInfo(
            loan_amount=loan_amount,
            interest_rate=interest_rate,
            loan_term_years=loan_term_years,
            repayment_method=repayment_method,
        ),
        initial_costs=overrides.get(
            "initial_costs",
            InitialCosts(
                agent_fee=1_056_000,
                registration_fee=300_000,
                stamp_duty=10_000,
                acquisition_tax=300_000,
                other_costs=100_000,
            ),
        ),
        annual_costs=overrides.get(
            "annual_costs",
            AnnualCosts(
                property_tax=80_000,
                management_fee=10_000,
                maintenance_reserve=8_000,
                insurance=20_000,
                vacancy_rate=5,
                pm_fee_rate=5,
            ),
        ),
        selling_costs=overrides.get(
            "selling_costs",
            SellingCostConfig(agent_fee_rate=3, agent_fee_fixed=60_000, other_selling_costs=0),
        ),
    )


@pytest.fixture
def default_property():
    """The default 30M condo with a 27M, 35-year, 1.5% loan."""
    return make_property()
