"""
Stateless proxy for CMS nursing-facility lookups.
"""
