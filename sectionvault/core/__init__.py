"""Configuration, logging, authentication and transaction helpers."""
