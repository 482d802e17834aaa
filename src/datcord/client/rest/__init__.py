"""
REST API client.

Usage:
    from datcord.client.rest import ApiClient
    rest = ApiClient(token="Bot your-token")
"""

from datcord.client.rest.client import ApiClient

__all__ = ["ApiClient"]
