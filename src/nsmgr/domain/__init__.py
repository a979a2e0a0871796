"""Domain layer — namespace map, wiki settings, and resolution rules.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
