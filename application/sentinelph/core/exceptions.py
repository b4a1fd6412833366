"""
Domain exceptions raised by services and repositories.

Routes translate these into HTTP responses; none of them is retried inside
the service layer.
"""


class SentinelError(Exception):
    """Base class for SentinelPH domain errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class OTPError(SentinelError):
    """A one-time passcode could not be verified."""


class OTPNotFoundError(OTPError):
    def __init__(self, message: str = "OTP not found or expired"):
        super().__init__(message)


class OTPMismatchError(OTPError):
    def __init__(self, message: str = "Invalid OTP"):
        super().__init__(message)


class OTPExpiredError(OTPError):
    def __init__(self, message: str = "OTP expired"):
        super().__init__(message)


class OTPStoreUnavailableError(SentinelError):
    def __init__(self, message: str = "OTP service unavailable"):
        super().__init__(message)


class NotificationDeliveryError(SentinelError):
    """An email or SMS could not be handed to the provider."""


class ObservationNotFoundError(SentinelError):
    def __init__(self, observation_id: str):
        super().__init__(f"Observation {observation_id} not found")
        self.observation_id = observation_id


class SentinelNotFoundError(SentinelError):
    def __init__(self, sentinel_id: str):
        super().__init__("Sentinel not found")
        self.sentinel_id = sentinel_id


class AdminNotFoundError(SentinelError):
    def __init__(self, username: str):
        super().__init__("User not found")
        self.username = username


class UserCreationError(SentinelError):
    """Firebase Auth rejected the new account."""
