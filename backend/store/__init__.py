"""
Data access layer.

Responsibilities:
- Define the table-client interface every service talks to.
- Provide an in-process implementation seeded from CSV files.
- Resolve the nearest active outlet for a delivery coordinate.
"""
