"""
Firm module system

Catalogue of toggleable modules, per-firm enablement with dependency and
conflict validation, and typed per-module configuration.
"""
