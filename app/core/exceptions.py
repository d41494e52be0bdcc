# app/core/exceptions.py

"""
Workflow errors raised by the service layer.

Every error is a recoverable, user-facing notice: a short ``title`` and a
``description``. They derive from ``ValueError`` so routers can keep the
usual ``except ValueError`` translation into ``HTTPException``.
"""

from fastapi import HTTPException, status


class PortalError(ValueError):
    title = "Error"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, description: str, title: str | None = None):
        super().__init__(description)
        self.description = description
        if title:
            self.title = title

    def as_notice(self) -> dict:
        return {"title": self.title, "description": self.description}


class NotFoundError(PortalError):
    title = "Not Found"
    status_code = status.HTTP_404_NOT_FOUND


class PersistenceError(PortalError):
    title = "Error Saving Data"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class GatingViolation(PortalError):
    title = "Complete Previous Steps"
    status_code = status.HTTP_409_CONFLICT


class PaymentRequired(PortalError):
    title = "Payment Required"
    status_code = status.HTTP_409_CONFLICT


class PaymentError(PortalError):
    title = "Payment Failed"
    status_code = status.HTTP_402_PAYMENT_REQUIRED


class ApplicationLocked(PortalError):
    title = "Application Submitted"
    status_code = status.HTTP_409_CONFLICT


class SubmissionError(PortalError):
    title = "Error"
    status_code = status.HTTP_400_BAD_REQUEST


def to_http(exc: ValueError) -> HTTPException:
    """Translate a service error into the notice payload the frontend shows."""
    if isinstance(exc, PortalError):
        return HTTPException(status_code=exc.status_code, detail=exc.as_notice())
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"title": "Error", "description": str(exc)},
    )
