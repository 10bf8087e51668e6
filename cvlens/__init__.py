"""
CVLens - AI feedback for PDF documents.

Turns structured model feedback into page-linked overlay annotations.
"""
