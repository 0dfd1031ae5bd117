"""
Health and demo endpoints that do not touch the database.
"""
