class PromptEnhancerError(Exception):
    """Base class for domain-specific errors."""

    pass


class InvalidRequestError(PromptEnhancerError):
    """Exception raised when an enhancement request carries no usable input."""

    def __init__(self, message: str = "Input is required") -> None:
        super().__init__(message)
        self.message = message
