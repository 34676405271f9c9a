"""Secret domain models and enums."""
