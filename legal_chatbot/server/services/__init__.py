"""
Request-scoped services: caller authentication and dependency providers.
"""
