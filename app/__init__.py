"""
TCP hex client HTTP application.
"""
