"""cvp-inventory: typed client for the CloudVision Portal inventory API.

The package exposes an authenticated REST transport, pydantic models for the
inventory records returned by CVP, and an ``InventoryClient`` that wraps the
inventory endpoints with a handful of convenience lookups.
"""

__version__ = "0.1.0"
