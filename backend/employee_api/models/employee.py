"""Employee and contact models for the MongoDB collections."""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

CONTACT_FIELDS: tuple[str, ...] = (
    "name",
    "phone",
    "relationship",
    "email",
    "address",
    "city",
    "state",
)


def _falsy_as_absent(value: Any) -> Any:
    """Map falsy raw values (0, False, "") to None so they never overwrite."""
    return value if value else None


# Text that only overwrites a stored value when the raw input is truthy.
UpdateText = Annotated[str | None, BeforeValidator(_falsy_as_absent)]


class Contact(BaseModel):
    """A contact document as stored in the ``contacts`` collection."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    type: str | None = None
    name: str | None = None
    phone: str | None = None
    relationship: str | None = None
    email: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None


class Employee(BaseModel):
    """An employee document with its raw contact references."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    fullName: str | None = None
    jobTitle: str | None = None
    contacts: list[str] = []


class EmployeeDetail(BaseModel):
    """An employee with its contact references resolved to documents."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    fullName: str | None = None
    jobTitle: str | None = None
    contacts: list[Contact] = []


class EmployeePage(BaseModel):
    totalPages: int
    currentPage: int
    employees: list[EmployeeDetail]


class EmployeeCreate(BaseModel):
    """Flat creation form; fields are split into three contacts on insert."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    fullName: str | None = None
    jobTitle: str | None = None
    phoneNumber: str | None = None
    email: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    emergencyContact1: str | None = None
    emergencyContact1Phone: str | None = None
    emergencyContact1Relationship: str | None = None
    emergencyContact2: str | None = None
    emergencyContact2Phone: str | None = None
    emergencyContact2Relationship: str | None = None


class ContactUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    id: str | None = Field(default=None, alias="_id")
    name: UpdateText = None
    phone: UpdateText = None
    relationship: UpdateText = None
    email: UpdateText = None
    address: UpdateText = None
    city: UpdateText = None
    state: UpdateText = None


class EmployeeUpdate(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    fullName: UpdateText = None
    jobTitle: UpdateText = None
    contacts: list[ContactUpdate] | None = None
