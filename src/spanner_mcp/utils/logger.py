"""Logger utility for Spanner MCP Server.

Module loggers for the service layer. Handlers are configured once on the
root logger by lib.logging_config.setup_logging.
"""

import logging
from typing import Optional


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a specific module.

    Args:
        name: Module name (use __name__ in modules)

    Returns:
        Logger instance for the module
    """
    return logging.getLogger(name)


# Default logger instance
logger = get_logger("spanner_mcp")


def log_statement(statement: str, database: Optional[str] = None, logger_instance: Optional[logging.Logger] = None):
    """Log a SQL or DDL statement for debugging.

    Args:
        statement: Statement text
        database: Database resource name the statement targets
        logger_instance: Logger to use (defaults to main logger)
    """
    if logger_instance is None:
        logger_instance = logger

    # Truncate very long statements
    display = statement[:500] + "..." if len(statement) > 500 else statement
    display = ' '.join(display.split())  # Normalize whitespace

    if database:
        logger_instance.debug(f"Statement: {display} | Database: {database}")
    else:
        logger_instance.debug(f"Statement: {display}")


def log_error_with_context(error: Exception, context: dict, logger_instance: Optional[logging.Logger] = None):
    """Log an error with additional context information.

    Args:
        error: Exception that occurred
        context: Dictionary with context information
        logger_instance: Logger to use (defaults to main logger)
    """
    if logger_instance is None:
        logger_instance = logger

    logger_instance.error(
        f"{error.__class__.__name__}: {error} | Context: {context}",
        exc_info=True
    )


__all__ = [
    'logger',
    'get_logger',
    'log_statement',
    'log_error_with_context'
]
