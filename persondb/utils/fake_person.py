"""Synthetic person data for the generate endpoint."""

import random
from typing import Optional

from persondb.models.person import Person

FIRST_NAMES = [
    "Ada", "Alan", "Barbara", "Carlos", "Chen", "Dana", "Elena", "Farah",
    "Grace", "Hiro", "Ines", "Jamal", "Katrin", "Liam", "Maya", "Nikolai",
    "Olga", "Priya", "Quentin", "Rosa", "Samir", "Tess", "Umar", "Vera",
    "Wei", "Ximena", "Yusuf", "Zoe",
]

LAST_NAMES = [
    "Anderson", "Brown", "Castillo", "Dubois", "Eriksson", "Fischer",
    "Garcia", "Hansen", "Ibrahim", "Jensen", "Kowalski", "Lopez", "Moreau",
    "Nakamura", "O'Brien", "Patel", "Quinn", "Rossi", "Schmidt", "Tanaka",
    "Usman", "Varga", "Walsh", "Yamamoto", "Zhang",
]

COMPANY_PREFIXES = [
    "Acme", "Blue Harbor", "Cobalt", "Driftwood", "Evergreen", "Falcon",
    "Granite", "Helix", "Ironclad", "Juniper", "Keystone", "Lumen",
    "Meridian", "Northwind", "Orbit", "Pioneer", "Quantum", "Redwood",
    "Summit", "Trident",
]

COMPANY_KINDS = [
    "Analytics", "Labs", "Logistics", "Systems", "Foods", "Networks",
    "Holdings", "Partners", "Robotics", "Media", "Energy", "Health",
]

COMPANY_SUFFIXES = ["Inc", "LLC", "Group", "Co", "Corp", "Ltd"]


def fake_phone(rng: random.Random) -> str:
    """US style number; area and exchange codes never start with 0 or 1."""
    area = rng.randint(200, 999)
    exchange = rng.randint(200, 999)
    line = rng.randint(0, 9999)
    return f"{area}-{exchange}-{line:04d}"


def fake_person(rng: Optional[random.Random] = None) -> Person:
    """Return an unsaved Person with plausible name, phone and company."""
    rng = rng or random.Random()
    return Person(
        name=f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}",
        phone=fake_phone(rng),
        company=" ".join(
            [rng.choice(COMPANY_PREFIXES), rng.choice(COMPANY_KINDS), rng.choice(COMPANY_SUFFIXES)]
        ),
    )
