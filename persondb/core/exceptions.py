"""Custom exceptions for the persondb service"""

from typing import Optional


class PersonDBException(Exception):
    """Base exception for persondb"""

    def __init__(self, message: str, status_code: int = 500, detail: Optional[str] = None):
        self.message = message
        self.status_code = status_code
        self.detail = detail
        super().__init__(self.message)


class ConfigurationException(PersonDBException):
    """Missing or invalid startup configuration"""

    def __init__(self, message: str = "Invalid configuration", detail: Optional[str] = None):
        super().__init__(message, status_code=500, detail=detail)


class ConnectionException(PersonDBException):
    """Database connection could not be established"""

    def __init__(self, message: str = "Database connection failed", detail: Optional[str] = None):
        super().__init__(message, status_code=500, detail=detail)


class MigrationException(PersonDBException):
    """Schema migration failed"""

    def __init__(self, message: str = "Schema migration failed", detail: Optional[str] = None):
        super().__init__(message, status_code=500, detail=detail)


class DatabaseException(PersonDBException):
    """Database-related exceptions"""

    def __init__(self, message: str = "Database operation failed", detail: Optional[str] = None):
        super().__init__(message, status_code=500, detail=detail)
