"""Serve flattened project file contents to MCP clients."""

__version__ = "0.1.0"
