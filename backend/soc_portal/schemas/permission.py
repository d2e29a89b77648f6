from pydantic import BaseModel


class UnauthorizedAlertRequest(BaseModel):
    attemptedUrl: str
    alertType: str = "UNAUTHORIZED_ROUTE_ACCESS"  # or ADMIN_ACCESS_ATTEMPT
