"""Command-line helpers for mcpconfig."""
