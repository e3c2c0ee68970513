"""
Errors raised by the service layer.

Routes turn these into ``{"success": false, "error": message}`` responses
with the matching status code.
"""


class ShopError(Exception):
    status_code = 500

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ShopError):
    status_code = 400


class NotFoundError(ShopError):
    status_code = 404


class ConflictError(ShopError):
    """Another writer changed the rows this operation was about to update"""
    status_code = 409
