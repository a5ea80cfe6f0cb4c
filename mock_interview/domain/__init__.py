"""
Domain models and the role catalogue.
"""
