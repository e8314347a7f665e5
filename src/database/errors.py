"""
Database error types
"""

QUERY_FAILED_MESSAGE = "Database query execution failed"


class DatabaseQueryError(Exception):
    """
    Generic failure raised by the database layer.

    The driver error is logged where it happens and chained as __cause__,
    but its text never reaches an HTTP response.
    """

    def __init__(self, message: str = QUERY_FAILED_MESSAGE):
        super().__init__(message)
        self.message = message
