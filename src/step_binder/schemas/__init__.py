"""Configuration schemas for step-binder."""

from .binding_config import BindingConfig

__all__ = ["BindingConfig"]
