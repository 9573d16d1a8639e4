"""Domain layer — animal kinds, animals, owners, identifiers, sample data.

This layer depends only on stdlib and pydantic.
At runtime it must never import from services, infrastructure, commands,
or config.
"""
