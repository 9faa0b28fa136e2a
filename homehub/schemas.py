"""
Entity schemas for the reservation engine

Each model is stored as part of a whole-collection document (see store.py).
Field names are the persisted names; ``to_document`` / ``model_validate``
convert between models and stored JSON.
"""

import time
import uuid
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


def generate_id(prefix: str) -> str:
    """Generate a unique id with a readable type prefix, e.g. ``r_3f2a...``"""
    return f"{prefix}_{uuid.uuid4().hex}"


def now_millis() -> int:
    return int(time.time() * 1000)


class Role(str, Enum):
    CLIENT = "client"
    WORKER = "worker"


class ReservationStatus(str, Enum):
    CREATED = "CREATED"
    COMPLETED = "COMPLETED"


class ServiceCategory(str, Enum):
    LIMPIEZA = "limpieza"
    PLOMERIA = "plomeria"
    ELECTRICIDAD = "electricidad"
    OTROS = "otros"


class Document(BaseModel):
    def to_document(self) -> dict:
        return self.model_dump(mode="json")


class User(Document):
    id: str = Field(default_factory=lambda: generate_id("u"))
    name: str
    email: str = Field(..., description="Unique, case-sensitive login key")
    password_hash: str
    role: Role = Role.CLIENT


class Actor(Document):
    """The authenticated user of the current session"""

    id: str
    name: str
    email: str
    role: Role


class Worker(Document):
    id: str
    name: str


class Service(Document):
    id: str
    name: str
    price: int = Field(..., ge=0, description="Whole currency units")
    approx_duration: str = Field(..., description="Display label, e.g. '2 h'")


class Message(Document):
    sender_name: str
    text: str
    timestamp_millis: int


class Rating(Document):
    score: int
    comment: str = ""


class Reservation(Document):
    id: str = Field(default_factory=lambda: generate_id("r"))
    client_email: str
    service_id: str
    date: str
    time: str
    address: str
    status: ReservationStatus = ReservationStatus.CREATED
    # Snapshot copied at creation; never follows later worker edits
    assigned_worker: Worker
    messages: list[Message] = Field(default_factory=list)
    rating: Optional[Rating] = None
    created_at_millis: int = Field(default_factory=now_millis)
