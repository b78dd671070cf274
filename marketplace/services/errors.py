# marketplace/services/errors.py
from typing import Optional

from fastapi import HTTPException

_DUPLICATE_MESSAGES = {
    "username": "Username already exists",
    "email": "Email already exists",
    "order_id": "Shipment already exists for this order",
}


class DuplicateFieldError(HTTPException):
    """Unique constraint (other than the primary key) rejected an insert or update."""

    def __init__(self, field: Optional[str] = None, message: Optional[str] = None):
        self.field = field
        if message is None:
            message = _DUPLICATE_MESSAGES.get(field) or (f"{field} already exists" if field else "Record already exists")
        super().__init__(status_code=400, detail=message)


class IdGenerationError(HTTPException):
    """Primary-key collisions persisted through every retry."""

    def __init__(self, entity: str, attempts: int):
        self.entity = entity
        self.attempts = attempts
        super().__init__(
            status_code=500,
            detail={
                "message": f"Unable to create {entity} after {attempts} attempts. Please contact support.",
                "error": "ID generation failed",
            },
        )
