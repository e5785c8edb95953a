class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class ConfigurationError(DomainError):
    """Raised when a collaborator is wired without a required capability."""


class RecalculationError(DomainError):
    """Raised when rebuilding an employee's derived state fails."""

    def __init__(self, employee_id: int, message: str):
        super().__init__(f"Recalculation failed for employee {employee_id}: {message}")
        self.employee_id = employee_id
