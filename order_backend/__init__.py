"""
                Restaurant Order Backend

In-memory order-taking backend for a single restaurant: fixed menu,
order creation, add-on items, payment and delivery status tracking.

Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
