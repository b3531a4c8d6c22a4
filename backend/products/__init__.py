"""
Product catalog.

Responsibilities:
- Expose available juices with filtering, sorting and pagination.
- Look up single products, featured products and categories.
"""
