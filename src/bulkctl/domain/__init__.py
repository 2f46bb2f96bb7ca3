"""Domain layer — block accumulation rules and types.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
