"""
Errors raised by the REST clients for the hosted services (Notion, Cloudinary,
Clerk, Twilio). The app maps every one of them to a 500 response that carries
the remote message.
"""

from typing import Optional


class ExternalServiceError(Exception):
    """Raised when a call to a hosted service fails"""

    service = "external service"

    def __init__(self, message: str, status_code: Optional[int] = None, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code

    def __str__(self) -> str:
        return self.message


class NotionAPIError(ExternalServiceError):
    service = "Notion"


class CloudinaryError(ExternalServiceError):
    service = "Cloudinary"


class ClerkAPIError(ExternalServiceError):
    service = "Clerk"


class TwilioError(ExternalServiceError):
    service = "Twilio"
