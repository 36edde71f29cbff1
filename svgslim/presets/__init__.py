from .registry import PresetRegistry

__all__ = ["PresetRegistry"]
