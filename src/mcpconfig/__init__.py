"""Configuration management and client distribution for MCP servers."""

__version__ = "0.1.0"
