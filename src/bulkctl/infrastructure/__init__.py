"""Infrastructure layer — block log files and output streams.

This layer depends on stdlib and third-party libs (click, structlog).
It must never import from services, commands, or output.
"""
