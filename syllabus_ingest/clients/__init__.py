"""Client package exports for external provider integrations."""

from .model_gateway import ModelGateway

__all__ = ["ModelGateway"]
