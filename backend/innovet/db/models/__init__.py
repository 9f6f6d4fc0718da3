# backend/innovet/db/models/__init__.py

from innovet.db.models.user import User
from innovet.db.models.pet import Pet
from innovet.db.models.appointment import Appointment
from innovet.db.models.notification import Notification
from innovet.db.models.pet_nanny import PetNanny
from innovet.db.models.audit_log import AuditLog
