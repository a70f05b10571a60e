"""Clinic services: patients and appointments microservices."""

__version__ = "0.1.0"
