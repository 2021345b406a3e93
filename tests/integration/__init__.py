# Integration Tests
"""
Integration tests verify complete user workflows through the HTTP API.

Principle: Test behavior, not implementation.
"""
