"""MongoDB employee service.

Employees and contacts live in two collections. An employee stores its
contacts as a list of ObjectIds which are resolved against the contacts
collection on read (see ``_populate``). Multi-document writes are issued
sequentially without a transaction: a failure part-way through leaves the
documents written so far in place.
"""

from __future__ import annotations

import logging
import math
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorClient

from employee_api.core.config import Settings
from employee_api.models.employee import (
    CONTACT_FIELDS,
    Contact,
    Employee,
    EmployeeCreate,
    EmployeeDetail,
    EmployeePage,
    EmployeeUpdate,
)

logger = logging.getLogger(__name__)


def _object_id(value: str) -> ObjectId | None:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def _compact(doc: dict[str, Any]) -> dict[str, Any]:
    """Drop keys whose value was not supplied."""
    return {key: value for key, value in doc.items() if value is not None}


def _truthy_changes(source: Any, fields: tuple[str, ...]) -> dict[str, Any]:
    """Collect the fields of ``source`` that carry a non-empty value.

    Empty strings and missing values never overwrite what is stored.
    """
    changes: dict[str, Any] = {}
    for field in fields:
        value = getattr(source, field)
        if value:
            changes[field] = value
    return changes


class EmployeeService:
    def __init__(self) -> None:
        self.client: AsyncIOMotorClient | None = None
        self.employees: Any = None
        self.contacts: Any = None
        self.initialized: bool = False

    async def initialize(self, settings: Settings) -> None:
        if self.initialized:
            return

        if not settings.MONGO_URL:
            logger.warning("MONGO_URL missing, EmployeeService not initialized")
            return

        self.client = AsyncIOMotorClient(settings.MONGO_URL)
        db = self.client.get_default_database(settings.MONGO_DEFAULT_DATABASE)
        self.employees = db[settings.MONGO_EMPLOYEES_COLLECTION]
        self.contacts = db[settings.MONGO_CONTACTS_COLLECTION]

        await self.client.admin.command("ping")
        self.initialized = True
        logger.info("Connected to MongoDB (database=%s)", db.name)

    async def close(self) -> None:
        if self.client:
            self.client.close()
            self.client = None
            self.employees = None
            self.contacts = None
            self.initialized = False

    async def check_connection(self) -> bool:
        if not self.client:
            return False
        try:
            await self.client.admin.command("ping")
            return True
        except Exception:
            logger.exception("MongoDB connection check failed")
            return False

    def _require_store(self) -> None:
        if not self.initialized or self.employees is None or self.contacts is None:
            raise RuntimeError("EmployeeService not initialized")

    async def create_employee(self, payload: EmployeeCreate) -> Employee:
        self._require_store()

        contact_docs = [
            {
                "type": "Primary",
                "name": payload.emergencyContact1,
                "phone": payload.emergencyContact1Phone,
                "relationship": payload.emergencyContact1Relationship,
            },
            {
                "type": "Secondary",
                "name": payload.emergencyContact2,
                "phone": payload.emergencyContact2Phone,
                "relationship": payload.emergencyContact2Relationship,
            },
            {
                "type": "Additional",
                "phone": payload.phoneNumber,
                "email": payload.email,
                "address": payload.address,
                "city": payload.city,
                "state": payload.state,
            },
        ]

        contact_ids: list[ObjectId] = []
        for doc in contact_docs:
            result = await self.contacts.insert_one(_compact(doc))
            contact_ids.append(result.inserted_id)

        employee_doc = _compact({"fullName": payload.fullName, "jobTitle": payload.jobTitle})
        employee_doc["contacts"] = contact_ids
        result = await self.employees.insert_one(employee_doc)
        employee_doc["_id"] = result.inserted_id

        logger.info("Created employee %s with %d contacts", result.inserted_id, len(contact_ids))
        return self._to_employee(employee_doc)

    async def get_employee(self, employee_id: str) -> EmployeeDetail | None:
        self._require_store()

        oid = _object_id(employee_id)
        if oid is None:
            return None

        doc = await self.employees.find_one({"_id": oid})
        if not doc:
            return None

        populated = await self._populate([doc])
        return populated[0]

    async def list_employees(self, page: int = 1, limit: int = 10) -> EmployeePage:
        self._require_store()

        skip = (page - 1) * limit
        total = await self.employees.count_documents({})
        cursor = self.employees.find({}).skip(skip).limit(limit)
        docs = await cursor.to_list(length=None)

        return EmployeePage(
            totalPages=math.ceil(total / limit),
            currentPage=page,
            employees=await self._populate(docs),
        )

    async def update_employee(self, employee_id: str, payload: EmployeeUpdate) -> EmployeeDetail | None:
        employee = await self.get_employee(employee_id)
        if employee is None:
            return None

        employee_changes = _truthy_changes(payload, ("fullName", "jobTitle"))
        for field, value in employee_changes.items():
            setattr(employee, field, value)

        contact_changes: list[tuple[Contact, dict[str, Any]]] = []
        existing_by_id = {contact.id: contact for contact in employee.contacts}
        for update in payload.contacts or []:
            existing = existing_by_id.get(update.id)
            if existing is None:
                logger.debug("Ignoring contact %s not owned by employee %s", update.id, employee_id)
                continue
            changes = _truthy_changes(update, CONTACT_FIELDS)
            for field, value in changes.items():
                setattr(existing, field, value)
            if changes:
                contact_changes.append((existing, changes))

        if employee_changes:
            await self.employees.update_one({"_id": ObjectId(employee.id)}, {"$set": employee_changes})
        for contact, changes in contact_changes:
            await self.contacts.update_one({"_id": ObjectId(contact.id)}, {"$set": changes})

        return employee

    async def delete_employee(self, employee_id: str) -> bool:
        self._require_store()

        oid = _object_id(employee_id)
        if oid is None:
            return False

        doc = await self.employees.find_one_and_delete({"_id": oid})
        if not doc:
            return False

        result = await self.contacts.delete_many({"_id": {"$in": doc.get("contacts", [])}})
        logger.info("Deleted employee %s and %d contacts", oid, result.deleted_count)
        return True

    async def _populate(self, docs: list[dict[str, Any]]) -> list[EmployeeDetail]:
        """Resolve the contact references of ``docs`` with a single lookup.

        Contacts keep the order of the employee's reference list; references
        to contacts that no longer exist are dropped.
        """
        refs = {ref for doc in docs for ref in doc.get("contacts", [])}
        found: dict[Any, Contact] = {}
        if refs:
            async for contact_doc in self.contacts.find({"_id": {"$in": list(refs)}}):
                found[contact_doc["_id"]] = self._to_contact(contact_doc)

        return [
            EmployeeDetail(
                id=str(doc["_id"]),
                fullName=doc.get("fullName"),
                jobTitle=doc.get("jobTitle"),
                contacts=[found[ref] for ref in doc.get("contacts", []) if ref in found],
            )
            for doc in docs
        ]

    def _to_contact(self, raw: dict[str, Any]) -> Contact:
        data = {field: raw.get(field) for field in ("type", *CONTACT_FIELDS)}
        return Contact(id=str(raw["_id"]), **data)

    def _to_employee(self, raw: dict[str, Any]) -> Employee:
        return Employee(
            id=str(raw["_id"]),
            fullName=raw.get("fullName"),
            jobTitle=raw.get("jobTitle"),
            contacts=[str(ref) for ref in raw.get("contacts", [])],
        )


employee_service = EmployeeService()
