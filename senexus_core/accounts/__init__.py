"""
Users, roles and firm access.
"""
