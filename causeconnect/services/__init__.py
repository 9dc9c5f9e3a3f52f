"""
Services Module

Business logic between the API routes and the repositories.
"""
