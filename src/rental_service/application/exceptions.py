from __future__ import annotations


class AppError(Exception):
    """Base application error."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(detail)


class NotFoundError(AppError):
    pass


class ForbiddenError(AppError):
    pass


class ConflictError(AppError):
    pass


class ValidationError(AppError):
    pass


class InvalidCredentialsError(AppError):
    pass


class PersistenceError(AppError):
    """Storage was unavailable; the unit of work has been rolled back."""


class PaymentGatewayError(AppError):
    pass
