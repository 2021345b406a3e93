"""Photoshelf - multi-user photo storage and gallery service."""
