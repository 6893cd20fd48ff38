"""Service layer — fractal operations returning ServiceResult.

Services may import from domain and plugins.
They must never import from commands or output.
"""
