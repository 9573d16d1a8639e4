"""Infrastructure layer — in-memory repository, flat-file codec, session state.

This layer may import domain models; it must never import from services,
commands, or output.
"""
