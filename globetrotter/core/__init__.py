"""
Core infrastructure for the GlobeTrotter backend.
Database access, sessions, security helpers, errors and logging.
"""
