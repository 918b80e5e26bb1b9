"""MCP tool implementations.

Tool functions carry no decorators; core/main.py registers them with the server.
Each tool returns the operation's OperationResult serialized as JSON text.
"""
