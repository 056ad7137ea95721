"""Spanner MCP Server: query plans and schema management for Cloud Spanner over MCP."""

__version__ = "0.1.0"
