"""
Error taxonomy for the API.

Every error is rendered as ``{"message": ...}`` with its status code by the
handlers registered in ``main.create_app``. Documents that are simply absent
are not errors: the store's empty result is passed through.
"""


class ApiError(Exception):
    status_code = 500
    message = "internal server error"

    def __init__(self, message: str = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class Unauthenticated(ApiError):
    status_code = 401
    message = "unauthorized access"


class Forbidden(ApiError):
    status_code = 403
    message = "forbidden access"


class ValidationFailure(ApiError):
    status_code = 400
    message = "invalid request"


class UpstreamFailure(ApiError):
    status_code = 502
    message = "payment provider unavailable"
