"""
Web layer: FastAPI routes for upload, report rendering and export.
"""
