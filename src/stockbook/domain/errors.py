class AppError(Exception):
    """Base app error."""


class ValidationError(AppError):
    pass


class DuplicateEntryError(ValidationError):
    pass


class ConfirmationRequiredError(ValidationError):
    pass


class InsufficientStockError(ValidationError):
    def __init__(self, message: str, available: float):
        super().__init__(message)
        self.available = available


class NotFoundError(AppError):
    pass


class StorageError(AppError):
    pass
