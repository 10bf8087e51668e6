"""
Selection Registry Module.

Single source of truth for the active feedback item, shared between
the feedback list and the PDF overlay.
"""
