"""Module: vets."""

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from innovet.api.v1.routes.deps import get_current_user, get_db
from innovet.core.errors import ForbiddenError
from innovet.db.models.user import ROLE_VETERINARIAN, User
from innovet.services.vet_profiles import VetProfileFields, apply_vet_profile, vet_to_dict

router = APIRouter()


def _require_vet(user: User) -> User:
    if user.role != ROLE_VETERINARIAN:
        raise ForbiddenError("Only veterinarians have a vet profile.")
    return user


# Endpoint: veterinarian directory used by the booking form.
@router.get("", summary="List veterinarians")
def list_vets(
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    vets = db.execute(
        select(User).where(User.role == ROLE_VETERINARIAN).order_by(User.full_name.asc())
    ).scalars().all()
    return [vet_to_dict(v) for v in vets]


@router.get("/me/profile", summary="Current vet's profile settings")
def get_my_profile(user: User = Depends(get_current_user)):
    return vet_to_dict(_require_vet(user))


@router.put("/me/profile", summary="Update current vet's profile settings")
def update_my_profile(
    payload: VetProfileFields,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    _require_vet(user)
    apply_vet_profile(user, payload)
    db.commit()
    db.refresh(user)
    return vet_to_dict(user)
