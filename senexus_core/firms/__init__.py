"""
Firms: the tenants of the platform and the legal entities they operate.
"""
