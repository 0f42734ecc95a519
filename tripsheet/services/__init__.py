"""External services: extraction, review, billing and storage."""
