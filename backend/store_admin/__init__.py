"""
Store Admin API - multi-tenant store builder backend
"""
