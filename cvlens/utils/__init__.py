"""
Utility modules for CVLens.

Cross-cutting concerns:
- Coordinates: Map viewer clicks to pages and page-local positions
- Storage: File I/O helpers for analysis reports
"""
