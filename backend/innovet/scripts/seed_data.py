"""Module: seed_data."""

from faker import Faker
import random
import string
import csv
from pathlib import Path
from datetime import date, timedelta

from sqlalchemy import delete
from sqlalchemy.orm import Session

from innovet.core.security import hash_password
from innovet.db.init_db import init_db
from innovet.db.session import SessionLocal, engine

from innovet.db.models.user import ROLE_NGO, ROLE_PET_OWNER, ROLE_VETERINARIAN, User
from innovet.db.models.pet import Pet
from innovet.db.models.appointment import Appointment
from innovet.db.models.notification import Notification
from innovet.db.models.pet_nanny import PetNanny
from innovet.db.models.audit_log import AuditLog
from innovet.services.vet_profiles import VET_AVAILABILITY

fake = Faker()

DOG_BREEDS = ["Labrador Retriever", "Golden Retriever", "Beagle", "Indie", "German Shepherd", "Pug"]
CAT_BREEDS = ["Persian", "Siamese", "Maine Coon", "Indie", "Bengal"]
SPECIALTIES = ["General Practice", "Dermatology", "Surgery", "Dentistry", "Behaviour", "Nutrition"]
NANNY_SERVICES = ["Pet Sitting", "Dog Walking", "Overnight Care", "Grooming", "Training"]
NANNY_PET_TYPES = ["Dogs", "Cats", "Birds", "Rabbits"]
APPOINTMENT_TYPES = ["Consultation", "Vaccination", "Training"]
TIME_SLOTS = ["09:00 AM", "10:30 AM", "12:00 PM", "02:00 PM", "03:30 PM", "05:00 PM"]

# Includes statuses written by older clients so the lifecycle adapter gets exercised.
STATUS_WEIGHTS = {
    "Pending": 0.35,
    "Approved": 0.2,
    "Completed": 0.2,
    "Rejected": 0.1,
    "Confirmed": 0.1,
    "Cancelled": 0.05,
}


# Shared helpers used by multiple seed builders.
def generate_password(length: int = 12) -> str:
    chars = string.ascii_letters + string.digits
    return "".join(random.choice(chars) for _ in range(length))


def generate_phone() -> str:
    return "+91 9" + "".join(random.choice(string.digits) for _ in range(9))


def export_credentials(credentials: list[tuple[User, str]], out_path: Path | None = None) -> Path:
    out_path = out_path or Path(__file__).resolve().parent / "seeded_user_credentials.csv"
    with out_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["user_id", "email", "password", "role"])
        for user, password in credentials:
            writer.writerow([str(user.user_id), user.email, password, user.role])
    return out_path


def reset_db(session: Session) -> None:
    # Children first so FK dependencies clear cleanly on every backend.
    for model in (AuditLog, Notification, Appointment, Pet, PetNanny, User):
        session.execute(delete(model))
    session.commit()


def seed_users(session: Session, n_owners: int = 40, n_vets: int = 8, n_ngos: int = 2) -> list[tuple[User, str]]:
    # Every account gets its own password; the plaintext only leaves via the CSV export.
    credentials: list[tuple[User, str]] = []
    roles = [ROLE_PET_OWNER] * n_owners + [ROLE_VETERINARIAN] * n_vets + [ROLE_NGO] * n_ngos
    for role in roles:
        password = generate_password()
        user = User(
            email=fake.unique.email().lower(),
            password=hash_password(password),
            role=role,
            full_name=fake.name(),
            phone=generate_phone(),
        )
        if role == ROLE_VETERINARIAN:
            user.vet_specialty = random.choice(SPECIALTIES)
            user.vet_experience_years = random.randint(1, 25)
            user.vet_clinic_name = f"{fake.last_name()} Veterinary Clinic"
            user.vet_clinic_address = fake.street_address()
            user.vet_city = fake.city()
            user.vet_consultation_fee = random.choice([300, 450, 500, 650, 800])
            user.vet_availability = random.choice(VET_AVAILABILITY)
            user.vet_description = fake.sentence(nb_words=14)
        credentials.append((user, password))
    session.add_all([user for user, _ in credentials])
    session.commit()
    return credentials


def seed_pets(session: Session, owners: list[User], per_owner: int = 2) -> list[Pet]:
    pets: list[Pet] = []
    codes: set[str] = set()
    for owner in owners:
        for _ in range(random.randint(1, per_owner)):
            species = random.choice(["Dog", "Cat"])
            code = f"PET-{random.randint(0, 99_999_999):08d}"
            while code in codes:
                code = f"PET-{random.randint(0, 99_999_999):08d}"
            codes.add(code)
            pets.append(Pet(
                pet_code=code,
                owner_id=owner.user_id,
                name=fake.first_name(),
                species=species,
                breed=random.choice(DOG_BREEDS if species == "Dog" else CAT_BREEDS),
                gender=random.choice(["male", "female"]),
                color=fake.color_name(),
                age_years=random.randint(0, 14),
                age_months=random.randint(0, 11),
                weight=round(random.uniform(2.5, 38.0), 2),
                profile_image="/images/pet-dog-1.jpg" if species == "Dog" else "/images/pet-cat-1.jpg",
                microchip_id="".join(random.choice(string.digits) for _ in range(15)),
                is_neutered=random.random() < 0.6,
                is_rescue=random.random() < 0.2,
            ))
    session.add_all(pets)
    session.commit()
    return pets


def seed_appointments(session: Session, pets: list[Pet], owners: list[User], vets: list[User], n: int = 120) -> list[Appointment]:
    # About one in five bookings only carries the vet's display name, the way older
    # clients wrote them; visibility for those rows relies on name matching.
    owners_by_id = {o.user_id: o for o in owners}
    today = date.today()
    appointments: list[Appointment] = []
    for _ in range(n):
        pet = random.choice(pets)
        owner = owners_by_id[pet.owner_id]
        vet = random.choice(vets)
        name_only = random.random() < 0.2
        status = random.choices(list(STATUS_WEIGHTS), weights=list(STATUS_WEIGHTS.values()), k=1)[0]
        appointments.append(Appointment(
            owner_id=owner.user_id,
            vet_id=None if name_only else vet.user_id,
            vet_name=f"Dr. {vet.full_name}" if name_only else vet.full_name,
            pet_name=pet.name,
            date=today + timedelta(days=random.randint(-30, 30)),
            time=random.choice(TIME_SLOTS),
            mode=random.choice(["Online", "In-clinic"]),
            type=random.choice(APPOINTMENT_TYPES),
            status=status,
            status_reason="Vet unavailable on this date." if status == "Rejected" else None,
            notes=fake.sentence(nb_words=10) if random.random() < 0.5 else None,
            owner_name=owner.full_name,
            owner_phone=owner.phone,
            owner_email=owner.email,
        ))
    session.add_all(appointments)
    session.commit()
    return appointments


def seed_notifications(session: Session, pets: list[Pet], per_pet: int = 2) -> int:
    titles = {
        "sos": "SOS alert raised",
        "medical": "Health check reminder",
        "appointment": "Upcoming appointment",
        "vaccination": "Vaccination due",
        "prescription": "Prescription refill",
        "training": "Training session tip",
    }
    notifications: list[Notification] = []
    for pet in pets:
        for _ in range(random.randint(0, per_pet)):
            kind = random.choice(list(titles))
            notifications.append(Notification(
                user_id=pet.owner_id,
                type=kind,
                title=titles[kind],
                description=fake.sentence(nb_words=12),
                pet_name=pet.name,
                is_read=random.random() < 0.4,
                is_user_triggered=kind == "sos" and random.random() < 0.5,
            ))
    session.add_all(notifications)
    session.commit()
    return len(notifications)


def seed_nannies(session: Session, n: int = 15) -> int:
    nannies: list[PetNanny] = []
    for i in range(n):
        services = random.sample(NANNY_SERVICES, k=random.randint(1, 3))
        pet_types = random.sample(NANNY_PET_TYPES, k=random.randint(1, 2))
        nannies.append(PetNanny(
            name=fake.name(),
            image="Nanny",
            description=fake.sentence(nb_words=16),
            experience=f"{random.randint(1, 12)} years caring for pets",
            available_times=random.choice(["Weekdays 9am-6pm", "Weekends", "Evenings", "Flexible"]),
            availability=random.choice(["available", "available", "busy"]),
            distance_km=round(random.uniform(0.5, 20.0), 1),
            rating=round(random.uniform(3.5, 5.0), 1),
            reviews_count=random.randint(0, 120),
            price_per_hour=random.choice([150, 200, 250, 300]),
            price_per_day=random.choice([900, 1200, 1500, 1800]),
            # Some rows keep the comma separated form older imports produced.
            services=services if i % 3 else ", ".join(services),
            pet_types=pet_types if i % 3 else ", ".join(pet_types),
            reviews_list=[
                {"reviewer": fake.first_name(), "rating": random.randint(3, 5), "text": fake.sentence()}
                for _ in range(random.randint(0, 3))
            ],
        ))
    session.add_all(nannies)
    session.commit()
    return len(nannies)


def run(session: Session, export: bool = True) -> dict:
    print("Resetting tables...")
    reset_db(session)

    print("Seeding users...")
    credentials = seed_users(session)
    owners = [u for u, _ in credentials if u.role == ROLE_PET_OWNER]
    vets = [u for u, _ in credentials if u.role == ROLE_VETERINARIAN]

    print("Seeding pets...")
    pets = seed_pets(session, owners)

    print("Seeding appointments...")
    appointments = seed_appointments(session, pets, owners, vets)

    print("Seeding notifications and pet nannies...")
    notification_n = seed_notifications(session, pets)
    nanny_n = seed_nannies(session)

    counts = {
        "users": len(credentials),
        "pets": len(pets),
        "appointments": len(appointments),
        "notifications": notification_n,
        "nannies": nanny_n,
    }
    print("Done. " + ", ".join(f"{k}={v}" for k, v in counts.items()))
    if export:
        print(f"Credentials export: {export_credentials(credentials)}")
    return counts


if __name__ == "__main__":
    # python -m innovet.scripts.seed_data
    init_db(engine)
    session = SessionLocal()
    try:
        run(session)
    finally:
        session.close()
