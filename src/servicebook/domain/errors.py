"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class PermissionDenied(DomainError):
    """Action not available to the current actor role."""


class PersistenceError(DomainError):
    """The persistence channel rejected a read or write."""


class BlobError(DomainError):
    """The blob channel failed to store or locate a document."""


def transaction_not_found(transaction_id: str, bucket=None) -> str:
    """Return message for missing transaction."""
    if bucket is None:
        return f"Transaction {transaction_id} not found"
    return f"Transaction {transaction_id} not found on {bucket}"


def customer_not_found(name: str, contact: str) -> str:
    """Return message for missing customer identity."""
    return f"Customer '{name}' ({contact}) not found"


def employee_not_found(employee_id: int) -> str:
    """Return message for missing employee."""
    return f"Employee {employee_id} not found"


def non_positive_amount(amount) -> str:
    """Return message for a rejected amount."""
    return f"Amount must be greater than zero (got {amount})"


def action_not_permitted(role: str, action: str) -> str:
    """Return message when a role may not perform an action."""
    return f"Role '{role}' is not allowed to {action.replace('_', ' ')}"


def too_many_decimal_places(amount, places: int) -> str:
    """Return message for an amount finer than the stored precision."""
    return f"Amount {amount} has more than {places} decimal places"
