"""Constants, exceptions, record types and configuration models."""
