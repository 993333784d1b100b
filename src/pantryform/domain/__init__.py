"""Domain layer — intake records, guideline rules, and the recommendation core.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
