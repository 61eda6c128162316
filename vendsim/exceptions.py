class VendingMachineError(Exception):
    """Base class for every error raised by the vending machine engine."""


class InvalidConfigurationError(VendingMachineError):
    """Raised by construct, configure and load when a structural precondition fails."""


class InvalidInputError(VendingMachineError):
    """Raised by insert and press for a non-positive coin or an unknown button."""


class MachineNotConstructedError(VendingMachineError):
    """Raised when an operation other than construct runs before any machine exists."""


class ScriptParseError(Exception):
    def __init__(self, message: str, line: int, column: int):
        super().__init__(f"{message} (line {line}, column {column})")
        self.line = line
        self.column = column
