# Photoshelf Test Suite
"""
Test suite for Photoshelf.

Unit tests exercise services, repositories and tokens directly;
integration tests go through the HTTP API.
"""
