"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested client, transaction or VIN does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations or a repeated refund."""


class InvalidOperationError(DomainError):
    """Operation is not permitted for the current state of the entity."""


class StorageError(DomainError):
    """Underlying persistence failure. Never retried by the ledger."""


def client_not_found(client_id: str) -> str:
    """Return message for missing client."""
    return f"Client {client_id} not found"


def transaction_not_found(transaction_id: str) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def vin_not_found(vin_id: str) -> str:
    """Return message for missing VIN record."""
    return f"VIN record {vin_id} not found"


def duplicate_phone(phone: str) -> str:
    """Return message for a phone number already owned by another client."""
    return f"Client with phone '{phone}' already exists"


def duplicate_vin(vin: str, client_id: str) -> str:
    """Return message for a VIN already registered for the client."""
    return f"VIN '{vin}' is already registered for client {client_id}"


def already_refunded(transaction_id: str) -> str:
    """Return message when a purchase already has a refund."""
    return f"Transaction {transaction_id} has already been refunded"


def refund_of_refund(transaction_id: str) -> str:
    """Return message when trying to refund a refund transaction."""
    return f"Transaction {transaction_id} is a refund and cannot be refunded"
