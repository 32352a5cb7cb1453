"""
HTTP API package (FastAPI).
"""
