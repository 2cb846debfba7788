class PersistenceError(RuntimeError):
    """Raised when the document store fails to create or update an appointment."""
    pass


class InvalidDateOrTime(ValueError):
    """Raised when a date or time string does not match the expected format."""
    pass


class DateOutOfRange(InvalidDateOrTime):
    """Raised when a well-formed date/time has a component outside its valid range."""
    pass


class LLMUpstreamError(RuntimeError):
    """Raised when LLM provider fails (timeouts, network errors, service unavailable)."""
    pass


class LLMContractError(RuntimeError):
    """Raised when LLM adapter violates contract (bad format or missing data)."""
    pass
