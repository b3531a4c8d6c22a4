"""
Order placement and tracking.

Responsibilities:
- Price line items against current catalog prices.
- Assemble orders against the nearest outlet, with compensating cleanup
  when a later write fails.
- Report tracking progress and guard status transitions.
"""
