"""Library exceptions."""


class CalculationError(Exception):
    """
    Raised when inputs are structurally unusable for a calculation.

    Numeric edge cases (zero denominators, short history, overflow) never
    raise; they resolve to a default value so the forward sweep completes.
    This is reserved for misuse such as auxiliary series of the wrong
    length or asking a multi-output bundle for a single input series.
    """
