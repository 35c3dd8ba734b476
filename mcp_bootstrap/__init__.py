"""mcp-bootstrap — prerequisite bootstrap and environment setup for the browser MCP server."""

__version__ = "0.1.0"
