"""Error types for Spanner MCP Server."""

class MCPError(Exception):
    """Base error class for MCP operations."""

    def __init__(self, message: str, recoverable: bool = True):
        super().__init__(message)
        self.message = message
        self.recoverable = recoverable


class InvalidArgumentError(MCPError):
    """Error raised when tool arguments fail validation."""

    def __init__(self, argument: str, reason: str):
        super().__init__(f"Invalid argument '{argument}': {reason}", recoverable=False)
        self.argument = argument
        self.reason = reason


class InvalidQueryError(MCPError):
    """Error raised when Spanner rejects a query."""

    def __init__(self, query: str, reason: str):
        message = f"Invalid query: {reason}. Query: {query[:100]}{'...' if len(query) > 100 else ''}"
        super().__init__(message, recoverable=False)
        self.query = query
        self.reason = reason


class DatabaseNotFoundError(MCPError):
    """Error raised when the project, instance or database does not exist."""

    def __init__(self, database_path: str, message: str = None):
        if message is None:
            message = f"Database '{database_path}' does not exist or is not accessible"
        super().__init__(message, recoverable=False)
        self.database_path = database_path


class DatabaseConnectionError(MCPError):
    """Error raised when a Spanner client cannot be created or authenticated."""

    def __init__(self, message: str):
        super().__init__(message, recoverable=True)


class DdlOperationError(MCPError):
    """Error raised when a schema update is rejected, fails or times out."""

    def __init__(self, statements, reason: str, recoverable: bool = False):
        count = len(statements)
        super().__init__(f"DDL update failed ({count} statement{'s' if count != 1 else ''}): {reason}",
                         recoverable=recoverable)
        self.statements = list(statements)
        self.reason = reason


class PlanProcessingError(MCPError):
    """Error raised when a query plan graph cannot be linearized."""

    def __init__(self, message: str):
        super().__init__(message, recoverable=False)
