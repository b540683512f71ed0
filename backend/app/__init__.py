"""
MAHSA microlearning backend.
"""
