# auris/lib/errors.py
from typing import Optional


class ContactError(Exception):
    """A user-facing rejection; message is already localized."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class DeliveryError(Exception):
    # The message never includes the target URL (webhook URLs may embed a secret).
    def __init__(self, channel: str, status_code: int, detail: Optional[str] = None):
        super().__init__(f"{channel} delivery failed with status {status_code}")
        self.channel = channel
        self.status_code = status_code
        self.detail = detail
