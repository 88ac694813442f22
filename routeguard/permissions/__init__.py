"""
Permissions data layer: cache, resolution of a route's permissions, and the
transport used to fetch remote permission documents.
"""
