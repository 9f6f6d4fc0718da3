"""Module: nanny_directory.

Read-side shaping and filtering for the pet-nanny directory. Rows written by
older tooling carry ``services`` and ``pet_types`` as comma separated strings
and may leave numeric columns empty, so every field is normalized before
filters are applied.
"""

from innovet.db.models.pet_nanny import PetNanny

DEFAULT_MAX_DISTANCE_KM = 10


def split_list(raw) -> list[str]:
    if isinstance(raw, list):
        return [str(x).strip() for x in raw if str(x).strip()]
    return [part.strip() for part in str(raw or "").split(",") if part.strip()]


def _number(value, default=0.0) -> float:
    return float(value) if value is not None else default


def nanny_to_dict(row: PetNanny) -> dict:
    return {
        "id": str(row.nanny_id),
        "name": row.name or "Pet Nanny",
        "image": row.image or "Nanny",
        "distance_km": _number(row.distance_km),
        "rating": _number(row.rating),
        "reviews_count": int(row.reviews_count or 0),
        "description": row.description or "No description provided.",
        "services": split_list(row.services),
        "price_per_hour": _number(row.price_per_hour),
        "price_per_day": _number(row.price_per_day),
        "availability": "busy" if row.availability == "busy" else "available",
        "pet_types": split_list(row.pet_types),
        "experience": row.experience or "Experience details not provided.",
        "reviews_list": row.reviews_list if isinstance(row.reviews_list, list) else [],
        "available_times": row.available_times or "Not specified",
    }


def filter_nannies(
    nannies: list[dict],
    search: str = "",
    max_distance_km: float = DEFAULT_MAX_DISTANCE_KM,
    service: str = "all",
    pet_type: str = "all",
) -> list[dict]:
    """Apply the directory filters; ``all`` disables the service and pet-type checks."""
    needle = (search or "").lower()
    out = []
    for nanny in nannies:
        if needle not in nanny["name"].lower():
            continue
        if nanny["distance_km"] > max_distance_km:
            continue
        if service != "all" and service not in nanny["services"]:
            continue
        if pet_type != "all" and pet_type not in nanny["pet_types"]:
            continue
        out.append(nanny)
    return out
