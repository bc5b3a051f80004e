from fastapi import HTTPException, status


class ApiError(HTTPException):
    """Base class for errors raised by services and access control."""

    status_code_default = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail_default = "Something went wrong"

    def __init__(self, detail: str = None, headers: dict = None):
        super().__init__(
            status_code=self.status_code_default,
            detail=detail or self.detail_default,
            headers=headers,
        )


class BadRequestError(ApiError):
    status_code_default = status.HTTP_400_BAD_REQUEST
    detail_default = "Bad request"


class AuthenticationError(ApiError):
    status_code_default = status.HTTP_401_UNAUTHORIZED
    detail_default = "Could not validate credentials"

    def __init__(self, detail: str = None):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class AuthorizationError(ApiError):
    status_code_default = status.HTTP_403_FORBIDDEN
    detail_default = "Not enough permissions"


class NotFoundError(ApiError):
    status_code_default = status.HTTP_404_NOT_FOUND
    detail_default = "Resource not found"


class ConflictError(ApiError):
    status_code_default = status.HTTP_409_CONFLICT
    detail_default = "Resource already exists"


class TooManyRequestsError(ApiError):
    status_code_default = status.HTTP_429_TOO_MANY_REQUESTS
    detail_default = "Too many requests from this IP, please try again later"
