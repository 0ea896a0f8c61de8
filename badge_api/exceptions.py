# badge_api/exceptions.py
"""
Error taxonomy shared by services and routers.
Each error carries the HTTP status and the message shown to the client;
main.py turns them into JSON responses.
"""


class BadgeAPIError(Exception):
    status_code = 500
    public_message = "Server error"

    def __init__(self, message: str = None):
        super().__init__(message or self.public_message)
        self.message = message or self.public_message


class ValidationError(BadgeAPIError):
    """A required field is missing or blank."""
    status_code = 400
    public_message = "Invalid request"


class NotFoundError(BadgeAPIError):
    """Delete-by-key matched no row."""
    status_code = 404
    public_message = "Not found"


class StoreError(BadgeAPIError):
    """Any connectivity, query, or timeout failure against the database.
    The detail is logged; clients only ever see the generic message."""
    status_code = 500
    public_message = "Server error"

    def __init__(self, detail: str = None):
        super().__init__(self.public_message)
        self.detail = detail
