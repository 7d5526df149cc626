"""
Exception taxonomy shared by services and routes.

Services raise these where a rule is violated; the handler registered in
``flowershop.main`` turns them into ``ErrorResponse`` bodies with the matching
HTTP status. Nothing in between catches them.
"""


class ShopError(Exception):
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# -------------------------
# 404
# -------------------------

class NotFound(ShopError):
    status_code = 404


class OrderNotFound(NotFound):
    pass


class UserNotFound(NotFound):
    pass


class ProductNotFound(NotFound):
    pass


class CategoryNotFound(NotFound):
    pass


class FavoriteNotFound(NotFound):
    pass


class CartItemNotFound(NotFound):
    pass


# -------------------------
# 4xx rule violations
# -------------------------

class BadRequest(ShopError):
    status_code = 400


class Unauthorized(ShopError):
    status_code = 401


class Forbidden(ShopError):
    """A role or time-window rule refused the operation."""
    status_code = 403


class AccessDenied(ShopError):
    """The caller does not own the resource (or is not an admin)."""
    status_code = 403


class Conflict(ShopError):
    status_code = 409


class EmailAlreadyExists(Conflict):
    pass


class UsernameAlreadyExists(Conflict):
    pass


class ProductAlreadyExists(Conflict):
    pass


class CategoryAlreadyExists(Conflict):
    pass


class ResourceInUse(Conflict):
    pass
