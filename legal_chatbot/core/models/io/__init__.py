"""
API I/O models (request and response schemas).
"""
