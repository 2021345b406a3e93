"""Infrastructure layer - persistence and security primitives."""
