from flowershop.schemas.base import CamelModel


class ErrorResponse(CamelModel):
    message: str
    status: str
    status_code: int
