"""Bookings app package.

Customers book one or more rooms and/or homestays for a date range. The
services module owns conflict detection and keeps the availability of
booked entities in step with the booking status inside one transaction.
"""
