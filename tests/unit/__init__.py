"""Unit tests for cvp-inventory.

HTTP traffic is mocked with respx, so these tests need no CVP server and no
real credentials. Shared fixtures live in conftest.py.
"""
