"""Custom exceptions for seed and mock data generation."""


class SeedDataError(Exception):
    """Base exception for seed and mock data generation."""

    pass


class ConfigurationError(SeedDataError):
    """Error in a generation configuration."""

    pass


class SeedPreconditionError(SeedDataError):
    """Raised when a stage runs before the entities it references exist."""

    pass


class RecordStoreError(SeedDataError):
    """Error inserting into, or calling a procedure on, the record store."""

    def __init__(self, message: str, table_name: str = None):
        super().__init__(message)
        self.table_name = table_name
