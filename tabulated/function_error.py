class FunctionError(Exception):
    """Exception raised for errors during tabulated function operation.

    Attributes:
        message -- explanation of the error
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class FunctionArgumentError(FunctionError, ValueError):
    pass


class FunctionPointIndexOutOfBoundsError(FunctionError, IndexError):
    pass


class InappropriateFunctionPointError(FunctionError, ValueError):
    pass


class FunctionStateError(FunctionError, RuntimeError):
    pass


class DomainWarning(UserWarning):
    """Warns that a function was evaluated outside of its domain."""
