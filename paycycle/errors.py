# paycycle/errors.py


class PaycycleError(Exception):
    """Base class for errors raised by paycycle."""


class ValidationError(PaycycleError, ValueError):
    """Required input is missing or cannot be coerced."""


class PersistenceError(PaycycleError):
    """The storage backend could not be read or written."""
