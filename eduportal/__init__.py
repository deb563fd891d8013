"""
eduportal: guarded mutations and derived dashboard state for a role-based
education portal backed by Supabase.
"""

__version__ = "0.1.0"
