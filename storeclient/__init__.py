"""
Client for the provision store API.

StoreClient talks to the REST backend; the helper modules work on the
lists it fetches (customer grouping, searches, bill drafts, dashboard).
"""
from storeclient.api import StoreClient, StoreSnapshot
from storeclient.exceptions import APIError

__all__ = ['StoreClient', 'StoreSnapshot', 'APIError']
