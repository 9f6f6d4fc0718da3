"""Module: nannies."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy import desc, select
from sqlalchemy.orm import Session

from innovet.api.v1.routes.deps import get_current_user, get_db
from innovet.db.models.pet_nanny import PetNanny
from innovet.db.models.user import User
from innovet.services.nanny_directory import DEFAULT_MAX_DISTANCE_KM, filter_nannies, nanny_to_dict

router = APIRouter()


# Endpoint: nanny directory, best rated first.
@router.get("", summary="Search the pet-nanny directory")
def list_nannies(
    search: str = Query(default=""),
    max_distance_km: float = Query(default=DEFAULT_MAX_DISTANCE_KM, ge=0),
    service: str = Query(default="all"),
    pet_type: str = Query(default="all"),
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    rows = db.execute(select(PetNanny).order_by(desc(PetNanny.rating))).scalars().all()
    nannies = [nanny_to_dict(r) for r in rows]
    return filter_nannies(nannies, search, max_distance_km, service, pet_type)
