"""
Recognition event contracts shared by the recognition controller and tests.
"""
