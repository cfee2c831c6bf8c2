"""Service layer — conversion logic returning ServiceResult.

Services may import from domain, infrastructure and config models.
They must never import from commands or output.
"""
