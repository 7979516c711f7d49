"""
API routers of the legal chatbot server.
"""
