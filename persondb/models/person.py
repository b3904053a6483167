from typing import Any, Optional, Sequence

from pydantic import BaseModel, Field


class Person(BaseModel):
    """A generated person record"""

    id: Optional[int] = Field(None, description="Person ID, assigned by the database")
    name: str = Field(..., description="Full name")
    phone: str = Field(..., description="Phone number")
    company: str = Field(..., description="Company name")

    @classmethod
    def from_row(cls, row: Sequence[Any]) -> "Person":
        """Build a Person from an ``(id, name, phone, company)`` row."""
        person_id, name, phone, company = row
        return cls(id=person_id, name=name, phone=phone, company=company)

    def as_text_line(self) -> str:
        return f"- {self.name} @ {self.company} ({self.phone})"
