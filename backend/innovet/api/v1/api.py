"""Module: api."""

from fastapi import APIRouter

# Operational routes (health/auth).
from innovet.api.v1.routes.health import router as health_router
from innovet.api.v1.routes.auth import router as auth_router

# Care workflow routes used by the owner and vet dashboards.
from innovet.api.v1.routes.appointments import router as appointments_router
from innovet.api.v1.routes.pets import router as pets_router
from innovet.api.v1.routes.notifications import router as notifications_router
from innovet.api.v1.routes.nannies import router as nannies_router
from innovet.api.v1.routes.vets import router as vets_router


api_router = APIRouter()

api_router.include_router(health_router, prefix="/health", tags=["health"])
api_router.include_router(auth_router, prefix="/auth", tags=["auth"])

api_router.include_router(appointments_router, prefix="/appointments", tags=["appointments"])
api_router.include_router(pets_router, prefix="/pets", tags=["pets"])
api_router.include_router(notifications_router, prefix="/notifications", tags=["notifications"])
api_router.include_router(nannies_router, prefix="/nannies", tags=["nannies"])
api_router.include_router(vets_router, prefix="/vets", tags=["vets"])
