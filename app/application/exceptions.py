class FlowCryptoError(RuntimeError):
    """Raised when an encrypted flow envelope cannot be opened."""
    pass


class KeyMismatchError(FlowCryptoError):
    """Raised when the session key cannot be unwrapped with the stored private key."""
    pass


class PayloadIntegrityError(FlowCryptoError):
    """Raised when the payload fails base64 decoding or AES-GCM authentication."""
    pass


class MalformedPayloadError(FlowCryptoError):
    """Raised when the decrypted payload is not a valid flow request."""
    pass


class FlowError(RuntimeError):
    """Base class for errors rendered back onto the current flow screen."""
    pass


class BookingValidationError(FlowError):
    """Raised when the user's input on a screen is missing or invalid."""
    pass


class CalendarUnavailableError(FlowError):
    """Raised when the calendar is not connected or a calendar call fails."""
    pass


class UnknownTransitionError(FlowError):
    """Raised for action/screen combinations outside the transition table."""
    pass
