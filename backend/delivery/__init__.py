"""
Delivery layer.

Responsibilities:
- Price delivery by distance to the nearest outlet.
- Estimate delivery time from the same distance.
- Answer fee, availability and outlet queries for the mobile client.
"""
