"""Application errors surfaced to users."""


class McNutritionError(Exception):
    """Base class for user-visible application errors."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(McNutritionError):
    """Input was rejected; nothing was written."""

    status_code = 400


class AuthenticationRequiredError(McNutritionError):
    """The operation needs a logged-in user."""

    status_code = 401


class NotAuthorizedError(McNutritionError):
    """The record belongs to another identity."""

    status_code = 403


class NotFoundError(McNutritionError):
    """The requested record does not exist."""

    status_code = 404


class PlannerApiError(McNutritionError):
    """The planner API answered with an error status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
