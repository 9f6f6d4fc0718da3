"""Module: base."""

from sqlalchemy.orm import DeclarativeBase


# Declarative base shared by users, pets, appointments, notifications and nannies.
class Base(DeclarativeBase):
    pass
