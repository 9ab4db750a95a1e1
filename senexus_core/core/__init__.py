"""
Shared building blocks for the platform apps: abstract models,
the service base class and API error handling.
"""
