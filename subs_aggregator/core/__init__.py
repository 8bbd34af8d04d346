"""Configuration, logging, exceptions and shared dependencies."""
