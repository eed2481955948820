# check/errors.py


class ResolutionNotFound(LookupError):
    """
    Raised when a check cannot resolve the client it was asked about.

    The message is the user-facing explanation placed in the error document.
    """
