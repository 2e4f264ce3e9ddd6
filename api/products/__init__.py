"""
Product catalog feature: schemas, SQL, business logic and HTTP endpoints.
"""
