"""
Senexus Platform Core

Multi-tenant firm management backend. It includes:

- Firms, their entities and the owning Senexus group (firms)
- Users, roles and firm assignments (accounts)
- The per-firm module catalogue with dependency and conflict checks (modules)
- Base models and the service layer (core)
"""

__version__ = "1.0.0"
