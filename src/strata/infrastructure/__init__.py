"""Infrastructure layer — database, cache, change signals, scripting host.

Implementation details hidden behind Site. Services access
infrastructure through the Site container or per-request providers.
"""
