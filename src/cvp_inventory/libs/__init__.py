"""Client libraries for CloudVision Portal services."""
