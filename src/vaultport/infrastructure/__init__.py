"""Infrastructure layer — filesystem listing/reading and the zip writer.

This layer depends on stdlib and the pure domain helpers.
It must never import from services, commands, or output.
The service layer bridges between domain rules and infrastructure.
"""
