"""
Products feature: validation, SQL building, persistence and HTTP routes.
"""
