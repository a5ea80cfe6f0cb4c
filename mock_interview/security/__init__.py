"""
Request input checks.
"""
