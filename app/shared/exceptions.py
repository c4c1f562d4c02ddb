from fastapi import HTTPException, status


class CredentialsException(HTTPException):
    """Exception for invalid credentials."""

    def __init__(self, detail: str = "Could not validate credentials"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class NotFoundException(HTTPException):
    """Exception for resource not found."""

    def __init__(self, detail: str = "Resource not found"):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
        )


class BadRequestException(HTTPException):
    """Exception for bad request."""

    def __init__(self, detail: str = "Bad request"):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
        )


class ConflictException(HTTPException):
    """Exception for resource conflict."""

    def __init__(self, detail: str = "Resource already exists"):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
        )


class ForbiddenException(HTTPException):
    """Exception for forbidden access."""

    def __init__(self, detail: str = "Forbidden"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
        )


class ValidationFailedException(BadRequestException):
    """Exception for user input that fails a local check (e.g. password mismatch)."""

    def __init__(self, detail: str = "Validation failed"):
        super().__init__(detail=detail)


class AccessDeniedException(ForbiddenException):
    """Exception for an unknown or revoked doctor sharing token.

    The detail is fixed so the response never reveals why access was refused.
    """

    def __init__(self):
        super().__init__(detail="This link is invalid or access has been revoked")


class ExtractionFailedException(HTTPException):
    """Exception for an upload the AI could not turn into a document record."""

    def __init__(
        self,
        detail: str = (
            "The AI failed to analyze the document. It might be unreadable or in an "
            "unsupported format. Please try a clearer image or a different file."
        ),
    ):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=detail,
        )


class TransientServiceFailure(Exception):
    """Raised by AI collaborators when a call fails.

    Never reaches the HTTP layer: the assistant orchestrator degrades it to an
    empty result or placeholder text.
    """
