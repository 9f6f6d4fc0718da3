"""Owner-scoped pet profiles."""

import re

from conftest import register

API = "/api/v1/pets"


def test_create_fills_defaults(client) -> None:
    """Only a name is needed; the rest gets display defaults and a PET- code."""

    owner = register(client, "Priya Sharma")
    response = client.post(API, json={"name": "Bruno"}, headers=owner["headers"])
    assert response.status_code == 201
    pet = response.json()

    assert re.fullmatch(r"PET-\d{8}", pet["pet_code"])
    assert pet["species"] == "Dog"
    assert pet["breed"] == "Not specified"
    assert pet["gender"] == "unknown"
    assert pet["profile_image"] == "/images/pet-dog-1.jpg"
    assert pet["notes"] == "No additional notes."


def test_list_update_delete(client) -> None:
    """The owner lists, edits and removes their pets."""

    owner = register(client, "Priya Sharma")
    pet = client.post(API, json={"name": "Bruno"}, headers=owner["headers"]).json()
    client.post(API, json={"name": "Misty", "species": "Cat"}, headers=owner["headers"])

    assert {p["name"] for p in client.get(API, headers=owner["headers"]).json()} == {"Bruno", "Misty"}

    response = client.put(
        f"{API}/{pet['id']}",
        json={"name": "Bruno", "breed": "Beagle", "age_years": 3, "weight": 11.5, "is_neutered": True},
        headers=owner["headers"],
    )
    assert response.status_code == 200
    assert response.json()["breed"] == "Beagle"
    assert response.json()["weight"] == 11.5
    assert response.json()["pet_code"] == pet["pet_code"]

    assert client.delete(f"{API}/{pet['id']}", headers=owner["headers"]).status_code == 204
    assert client.get(f"{API}/{pet['id']}", headers=owner["headers"]).status_code == 404


def test_other_accounts_cannot_touch_pets(client) -> None:
    """Another owner gets 403 and vets cannot manage pets."""

    owner = register(client, "Priya Sharma")
    other = register(client, "Rahul Verma")
    vet = register(client, "Sarah Johnson", role="veterinarian")
    pet = client.post(API, json={"name": "Bruno"}, headers=owner["headers"]).json()

    assert client.get(f"{API}/{pet['id']}", headers=other["headers"]).status_code == 403
    assert client.delete(f"{API}/{pet['id']}", headers=other["headers"]).status_code == 403
    assert client.get(API, headers=other["headers"]).json() == []
    assert client.get(API, headers=vet["headers"]).status_code == 403
    assert client.get(f"{API}/not-a-uuid", headers=owner["headers"]).status_code == 400
