"""
Shared building blocks: the error taxonomy, logging helpers and the water
scheduler encoding.
"""
