"""
Providers de recursos remotos.
"""
