"""Configuration, logging and error taxonomy shared by the service."""
