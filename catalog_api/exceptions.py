class ApplicationError(Exception):
    """Base class for application-specific errors."""
    pass

class VersionConflictError(ApplicationError):
    """Raised by a record store when a write does not observe the stored version."""
    def __init__(self, message="Record was modified concurrently.", current_version=None):
        super().__init__(message)
        self.current_version = current_version

class DatabaseError(ApplicationError):
    """Raised for general database-related errors not specifically handled."""
    def __init__(self, message="A database error occurred.", original_exception=None):
        super().__init__(message)
        self.original_exception = original_exception

class ConfigurationError(ApplicationError):
    """Raised when the service is missing or has invalid deployment settings."""
    pass
