from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List

from app.api.deps import get_db
from app.models.house import House
from app.schemas.catalog import HouseCreate, HouseUpdate, HouseOut
from app.core.audit import log_audit

router = APIRouter(prefix="/houses", tags=["houses"])


@router.get("", response_model=List[HouseOut])
def list_houses(
    db: Session = Depends(get_db),
    include_inactive: bool = Query(False, description="Also return inactive houses"),
):
    q = db.query(House)
    if not include_inactive:
        q = q.filter(House.is_active == True)
    return q.order_by(House.name).all()


@router.get("/{house_id}", response_model=HouseOut)
def get_house(house_id: int, db: Session = Depends(get_db)):
    house = db.query(House).filter(House.id == house_id).first()
    if not house:
        raise HTTPException(status_code=404, detail="House not found")
    return house


@router.post("", response_model=HouseOut, status_code=201)
def create_house(payload: HouseCreate, db: Session = Depends(get_db)):
    house = House(**payload.model_dump())
    db.add(house)
    db.commit()
    db.refresh(house)
    log_audit(
        db,
        action="created",
        entity_type="house",
        entity_id=str(house.id),
        description=f"House created: {house.name}",
    )
    return house


@router.patch("/{house_id}", response_model=HouseOut)
def update_house(house_id: int, payload: HouseUpdate, db: Session = Depends(get_db)):
    """
    Houses are never deleted (revenue entries and rates keep pointing at them);
    set is_active=false to retire one.
    """
    house = db.query(House).filter(House.id == house_id).first()
    if not house:
        raise HTTPException(status_code=404, detail="House not found")

    for k, v in payload.model_dump(exclude_unset=True).items():
        setattr(house, k, v)

    db.commit()
    db.refresh(house)
    log_audit(
        db,
        action="updated",
        entity_type="house",
        entity_id=str(house.id),
        description=f"House updated: {house.name}",
    )
    return house
