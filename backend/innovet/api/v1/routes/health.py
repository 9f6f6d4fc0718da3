"""Module: health."""

from fastapi import APIRouter

router = APIRouter()

# Endpoint: liveness probe; does not touch the database.
@router.get("/health")
def health():
    return {"status": "ok", "service": "innovet"}
