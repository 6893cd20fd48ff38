"""Domain layer — rule matrix, text codec, expander, and sinks.

This layer depends only on stdlib and pydantic.
It must never import from services, commands, output, or config.
"""
