"""
Water Blob Store checkout and order service
"""
__version__ = "1.0.0"
