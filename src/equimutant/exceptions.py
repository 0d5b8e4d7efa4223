# Custom exceptions for equimutant

class EquimutantError(Exception):
    """Base exception for all application-specific errors."""
    pass


class InvalidArgumentError(EquimutantError, ValueError):
    """Raised when a request argument fails validation, before any selection or mutation work."""
    pass


class BugReportError(InvalidArgumentError):
    """Raised when bug information is missing or unusable for guided selection."""

    @classmethod
    def missing(cls) -> "BugReportError":
        return cls("Guided selection requires bug information")

    @classmethod
    def invalid_lines(cls, detail: str) -> "BugReportError":
        return cls(f"Invalid bug lines: {detail}")


class PluginNotFoundError(InvalidArgumentError):
    """Raised when a specific transform is requested but not registered."""
    def __init__(self, name: str, available: list = None):
        self.name = name
        self.available = list(available or [])
        message = f"Transform not found: {name}"
        if self.available:
            message += f". Available transforms: {', '.join(self.available)}"
        super().__init__(message)


class InputFileError(EquimutantError):
    """Raised when the input source file cannot be read."""
    def __init__(self, file_path: str, message: str):
        self.file_path = file_path
        self.message = message
        super().__init__(f"Cannot read {file_path}: {message}")


class ParserError(EquimutantError):
    """Raised when a file cannot be parsed by tree-sitter."""
    def __init__(self, file_path: str, message: str):
        self.file_path = file_path
        self.message = message
        super().__init__(f"Failed to parse {file_path}: {message}")


class CorrelationError(EquimutantError):
    """Raised when a node cannot be unambiguously re-located in a re-parsed tree."""
    pass


class RewriteConflictError(EquimutantError):
    """Raised when two pending edits on the same tree overlap."""
    pass


class MutantWriteError(EquimutantError):
    """Raised when a mutant file cannot be written."""
    def __init__(self, output_path: str, message: str):
        self.output_path = output_path
        self.message = message
        super().__init__(f"Failed to write mutant {output_path}: {message}")


class ConfigError(EquimutantError):
    """Raised for configuration-related problems."""
    pass
