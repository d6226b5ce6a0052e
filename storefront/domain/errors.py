# storefront/domain/errors.py


class ShopError(Exception):
    """Base error for use-case failures; routers turn status_code into an HTTPException."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ShopError):
    status_code = 404


class ForbiddenError(ShopError):
    status_code = 403


class ConflictError(ShopError):
    status_code = 409


class BadRequestError(ShopError):
    status_code = 400


class OrderNumberTaken(ConflictError):
    """Raised when an insert loses the race for a generated order number."""

    def __init__(self, order_number: str):
        super().__init__(f"Order number {order_number} is already taken")
        self.order_number = order_number
