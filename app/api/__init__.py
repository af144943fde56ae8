"""
HTTP API for the TCP hex client.
"""
