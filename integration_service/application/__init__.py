"""Application layer: commands, queries and their handlers."""
