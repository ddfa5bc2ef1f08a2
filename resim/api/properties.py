"""
Property management API endpoints.

Stored properties are re-simulated on every request for their simulation;
results are never cached.
"""

import logging

from fastapi import APIRouter, HTTPException, Depends, status
from sqlalchemy.orm import Session

from resim.api.calculations import simulate
from resim.api.schemas import (
    PropertyListResponse,
    PropertyResponse,
    RealEstatePropertyInput,
    SimulationResponse,
)
from resim.db.database import get_db
from resim.db.models import PropertyRecord

logger = logging.getLogger(__name__)

router = APIRouter()


def property_to_response(record: PropertyRecord) -> PropertyResponse:
    """Convert a stored record to its response schema."""
    data = record.to_domain().to_dict()
    data["updated_at"] = record.updated_at
    return PropertyResponse.model_validate(data)


def get_property_or_404(db: Session, property_id: str) -> PropertyRecord:
    record = (
        db.query(PropertyRecord)
        .filter(PropertyRecord.id == property_id, PropertyRecord.is_deleted == False)
        .first()
    )

    if not record:
        raise HTTPException(status_code=404, detail="Property not found")

    return record


@router.get("/", response_model=PropertyListResponse)
async def list_properties(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
):
    """List stored properties, oldest first."""
    query = (
        db.query(PropertyRecord)
        .filter(PropertyRecord.is_deleted == False)
        .order_by(PropertyRecord.created_at)
    )

    total = query.count()
    records = query.offset(skip).limit(limit).all()

    return PropertyListResponse(
        properties=[property_to_response(r) for r in records],
        total=total,
    )


@router.post("/", response_model=PropertyResponse, status_code=201)
async def create_property(
    property_data: RealEstatePropertyInput,
    db: Session = Depends(get_db),
):
    """Store a new property."""
    prop = property_data.to_domain()

    # Soft-deleted rows still hold their id
    if db.get(PropertyRecord, prop.id) is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"A property with id {prop.id} already exists",
        )

    record = PropertyRecord.from_domain(prop)

    db.add(record)
    db.commit()
    db.refresh(record)

    logger.info(f"Created property {record.id}")
    return property_to_response(record)


@router.get("/{property_id}", response_model=PropertyResponse)
async def get_property(
    property_id: str,
    db: Session = Depends(get_db),
):
    """Get a property by ID."""
    return property_to_response(get_property_or_404(db, property_id))


@router.put("/{property_id}", response_model=PropertyResponse)
async def update_property(
    property_id: str,
    property_data: RealEstatePropertyInput,
    db: Session = Depends(get_db),
):
    """Replace a property's inputs. The id and creation time are kept."""
    record = get_property_or_404(db, property_id)

    data = property_data.to_domain().to_dict()
    record.name = data["property"]["name"]
    record.property_info = data["property"]
    record.loan = data["loan"]
    record.initial_costs = data["initial_costs"]
    record.annual_costs = data["annual_costs"]
    record.selling_costs = data["selling_costs"]

    db.commit()
    db.refresh(record)

    return property_to_response(record)


@router.delete("/{property_id}")
async def delete_property(
    property_id: str,
    db: Session = Depends(get_db),
):
    """Soft delete a property."""
    record = get_property_or_404(db, property_id)

    record.is_deleted = True
    db.commit()

    logger.info(f"Deleted property {property_id}")
    return {"deleted": True, "id": property_id}


@router.get("/{property_id}/simulation", response_model=SimulationResponse)
async def get_property_simulation(
    property_id: str,
    db: Session = Depends(get_db),
):
    """Simulate a stored property."""
    record = get_property_or_404(db, property_id)
    return simulate(record.to_domain())
