from fastapi import status


class CompanyRegistryError(Exception):
    """Base for domain errors that map onto a single `{"error": ...}` response."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    message: str = "Bad request"

    def __init__(self, message: str | None = None):
        self.message = message or self.message
        super().__init__(self.message)


class CompanyConflictError(CompanyRegistryError):
    status_code = status.HTTP_409_CONFLICT
    message = "Company with this INN already exists"


class CompanyForbiddenError(CompanyRegistryError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Unauthorized"


class CompanyNotFoundError(CompanyRegistryError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Company not found"


class EmailTakenError(CompanyRegistryError):
    status_code = status.HTTP_409_CONFLICT
    message = "User with this email already exists"
