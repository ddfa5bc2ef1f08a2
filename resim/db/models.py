"""
SQLAlchemy ORM models.
"""

from datetime import datetime, timezone
from sqlalchemy import (
    Column,
    String,
    Boolean,
    DateTime,
    JSON,
)
from sqlalchemy.orm import declarative_base

from resim.calculations.models import RealEstateProperty, generate_uuid

Base = declarative_base()


def _to_naive_utc(value: datetime) -> datetime:
    """Audit columns hold naive UTC; offset-aware values are converted first."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class AuditMixin:
    """Mixin for audit fields on all models."""

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )
    is_deleted = Column(Boolean, default=False, nullable=False)


class PropertyRecord(AuditMixin, Base):
    """
    A stored investment property.

    The five input groups are kept as JSON documents in the same snake_case
    shape RealEstateProperty.to_dict() produces.
    """

    __tablename__ = "properties"

    id = Column(String, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False, default="")

    property_info = Column(JSON, nullable=False)
    loan = Column(JSON, nullable=False)
    initial_costs = Column(JSON, nullable=False)
    annual_costs = Column(JSON, nullable=False)
    selling_costs = Column(JSON, nullable=False)

    @classmethod
    def from_domain(cls, prop: RealEstateProperty) -> "PropertyRecord":
        data = prop.to_dict()
        return cls(
            id=prop.id,
            name=prop.property.name,
            property_info=data["property"],
            loan=data["loan"],
            initial_costs=data["initial_costs"],
            annual_costs=data["annual_costs"],
            selling_costs=data["selling_costs"],
            created_at=_to_naive_utc(prop.created_at),
        )

    def to_domain(self) -> RealEstateProperty:
        return RealEstateProperty.from_dict(
            {
                "id": self.id,
                "created_at": self.created_at.replace(tzinfo=timezone.utc),
                "property": self.property_info,
                "loan": self.loan,
                "initial_costs": self.initial_costs,
                "annual_costs": self.annual_costs,
                "selling_costs": self.selling_costs,
            }
        )
