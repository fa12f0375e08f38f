"""Properties app package.

Listings owned by merchants (properties with their rooms and units, and
homestays), the amenity catalogue, the merchant listing quota and the
admin approval workflow.
"""
