"""
Shared Kernel

Building blocks reused by every domain app: the soft-delete model base,
value objects, the error taxonomy and the API response envelope.
"""
