"""Service layer — layer evaluation, widget placement, and layer administration.

Services may import from domain and infrastructure layers.
They must never import from commands or output.
"""
