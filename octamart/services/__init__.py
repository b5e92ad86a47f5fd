"""Service layer: database facade, repositories, models and helpers."""
