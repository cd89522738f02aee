"""Test suite for the cvp-inventory client.

Test Structure:
- unit/: transport, client, models, configuration and CLI tests with the CVP
  server mocked by respx
- unit/conftest.py: shared fixtures and pytest configuration

Run tests with:
    pytest tests/
    pytest tests/ -v  # verbose output
"""
