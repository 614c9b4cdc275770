"""MCP Server for the stored procedure generator

This package provides MCP tools for listing tables and generating stored procedures.
"""

from mcp_server.handlers import ProcedureHandler

__all__ = [
    "ProcedureHandler",
]
