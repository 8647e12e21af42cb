"""Vehicle registry domain service."""

import logging
import re
from typing import Optional

from bonusledger.database.base import Database
from bonusledger.domain.entities import ClientVin
from bonusledger.domain.errors import (
    NotFoundError,
    ValidationError,
    client_not_found,
    vin_not_found,
)

logger = logging.getLogger(__name__)

VIN_LENGTH = 17
VIN_PATTERN = re.compile(r"^[A-Za-z0-9]{17}$")


def normalize_vin(value: str) -> str:
    """Trim and upper-case a VIN."""
    return value.strip().upper()


def validate_vin(vin: str) -> None:
    """Raise ValidationError unless the VIN is 17 latin letters and digits."""
    if len(vin) != VIN_LENGTH or not VIN_PATTERN.match(vin):
        raise ValidationError(
            f"VIN must contain {VIN_LENGTH} characters: latin letters and digits"
        )


def normalize_label(value: Optional[str]) -> Optional[str]:
    """Trim a machine label; blank labels become None."""
    if value is None or value.strip() == "":
        return None
    return value.strip()


class VinService:
    """Service for managing the VINs registered to clients."""

    def __init__(self, db: Database):
        """Initialize VIN service.

        Args:
            db: Database instance
        """
        self.db = db

    def list_vins(self, client_id: str) -> list[ClientVin]:
        """List a client's VINs, oldest first."""
        return self.db.list_client_vins(client_id)

    def add_vin(self, client_id: str, vin: str, machine_label: Optional[str] = None) -> ClientVin:
        """Register a VIN for a client.

        Args:
            client_id: Owning client ID
            vin: Vehicle identification number (case-insensitive)
            machine_label: Optional human-readable vehicle name

        Returns:
            Created VIN record

        Raises:
            ValidationError: If the VIN is malformed
            NotFoundError: If the client doesn't exist
            ConflictError: If the client already has this VIN
        """
        vin = normalize_vin(vin)
        validate_vin(vin)

        if self.db.get_client(client_id) is None:
            raise NotFoundError(client_not_found(client_id))

        vin_id = self.db.add_client_vin(client_id, vin, normalize_label(machine_label))
        logger.info("Registered VIN %s for client %s", vin, client_id)
        return self.db.get_client_vin(vin_id)

    def update_label(self, vin_id: str, machine_label: Optional[str]) -> ClientVin:
        """Set or clear the machine label of a VIN record.

        Raises:
            NotFoundError: If the VIN record doesn't exist
        """
        if self.db.get_client_vin(vin_id) is None:
            raise NotFoundError(vin_not_found(vin_id))

        self.db.update_client_vin_label(vin_id, normalize_label(machine_label))
        return self.db.get_client_vin(vin_id)

    def delete_vin(self, vin_id: str) -> None:
        """Delete a VIN record.

        Raises:
            NotFoundError: If the VIN record doesn't exist
        """
        if self.db.get_client_vin(vin_id) is None:
            raise NotFoundError(vin_not_found(vin_id))

        self.db.delete_client_vin(vin_id)
        logger.info("Deleted VIN record %s", vin_id)
