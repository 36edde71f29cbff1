"""Named option bundles: built-ins from configuration plus caller-registered ones."""
from typing import Dict, List, Optional

from ..errors.exceptions import InvalidOptionsError, PresetNotFoundError
from ..optimization.options import OptimizationOptions
from ..utils.logger import get_logger

logger = get_logger(__name__)


class PresetRegistry:
    """
    Resolve preset names to OptimizationOptions.

    Owned per engine. Custom presets shadow built-ins of the same name and
    live for the lifetime of the registry only.
    """

    def __init__(self, config: dict):
        self._builtin: Dict[str, OptimizationOptions] = {}
        for name, data in (config.get("presets") or {}).items():
            try:
                self._builtin[name] = OptimizationOptions.from_dict(data)
            except InvalidOptionsError as e:
                raise InvalidOptionsError(f"Built-in preset '{name}' is invalid: {e}") from e
        self._custom: Dict[str, OptimizationOptions] = {}

    def get(self, name: str) -> OptimizationOptions:
        if name in self._custom:
            return self._custom[name]
        if name in self._builtin:
            return self._builtin[name]
        raise PresetNotFoundError(
            f"Unknown preset '{name}'; available: {', '.join(self.list_presets())}"
        )

    def add_custom_preset(self, name: str, options) -> OptimizationOptions:
        """Register `options` (OptimizationOptions or a plain dict) under `name`."""
        if not name or not isinstance(name, str):
            raise InvalidOptionsError("Preset name must be a non-empty string")
        preset = OptimizationOptions.from_dict(options)
        if name in self._builtin:
            logger.info(f"Custom preset '{name}' overrides the built-in preset")
        self._custom[name] = preset
        return preset

    def remove_custom_preset(self, name: str) -> bool:
        return self._custom.pop(name, None) is not None

    def is_custom(self, name: str) -> bool:
        return name in self._custom

    def list_presets(self) -> List[str]:
        return sorted(set(self._builtin) | set(self._custom))

    def get_presets(self, custom_only: Optional[bool] = False) -> Dict[str, OptimizationOptions]:
        if custom_only:
            return dict(self._custom)
        presets = dict(self._builtin)
        presets.update(self._custom)
        return presets
