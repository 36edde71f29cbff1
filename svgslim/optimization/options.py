"""Optimization options and tier-based resolution."""
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Optional, Tuple

from ..errors.exceptions import InvalidOptionsError

AGGRESSIVENESS_LEVELS = ("conservative", "moderate", "aggressive")
DEFAULT_AGGRESSIVENESS = "moderate"
MAX_PRECISION = 10

BOOLEAN_FIELDS = (
    "remove_comments",
    "remove_unnecessary_data",
    "cleanup_defs",
    "simplify_paths",
    "optimize_colors",
    "minify",
    "optimize_transforms",
    "remove_empty_containers",
    "inline_styles",
    "remove_invisible_elements",
)


@dataclass(frozen=True)
class Preserve:
    """Names and texts that passes must leave alone."""

    comments: Tuple[str, ...] = ()
    attributes: Tuple[str, ...] = ()
    elements: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Preserve":
        if not isinstance(data, dict):
            raise InvalidOptionsError(f"preserve must be a mapping, got {type(data).__name__}")
        unknown = set(data) - {"comments", "attributes", "elements"}
        if unknown:
            raise InvalidOptionsError(f"Unknown preserve keys: {', '.join(sorted(unknown))}")
        values = {}
        for key, items in data.items():
            items = items or ()
            if not isinstance(items, (list, tuple)) or not all(isinstance(i, str) for i in items):
                raise InvalidOptionsError(f"preserve.{key} must be a list of strings")
            values[key] = tuple(items)
        return cls(**values)

    def to_dict(self) -> Dict[str, list]:
        return {
            "comments": list(self.comments),
            "attributes": list(self.attributes),
            "elements": list(self.elements),
        }


@dataclass(frozen=True)
class OptimizationOptions:
    """
    Caller-facing options. None means "use the tier default".

    Explicit fields always win over the tier bundle, one field at a time.
    `preserve` is replaced as a whole, never merged.
    """

    aggressiveness: Optional[str] = None
    remove_comments: Optional[bool] = None
    remove_unnecessary_data: Optional[bool] = None
    cleanup_defs: Optional[bool] = None
    simplify_paths: Optional[bool] = None
    coordinate_precision: Optional[int] = None
    optimize_colors: Optional[bool] = None
    minify: Optional[bool] = None
    optimize_transforms: Optional[bool] = None
    remove_empty_containers: Optional[bool] = None
    inline_styles: Optional[bool] = None
    remove_invisible_elements: Optional[bool] = None
    preserve: Optional[Preserve] = None

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Raise InvalidOptionsError if any explicit field is malformed."""
        if self.aggressiveness is not None and self.aggressiveness not in AGGRESSIVENESS_LEVELS:
            raise InvalidOptionsError(
                f"Unknown aggressiveness '{self.aggressiveness}'; "
                f"expected one of {', '.join(AGGRESSIVENESS_LEVELS)}"
            )
        for name in BOOLEAN_FIELDS:
            value = getattr(self, name)
            if value is not None and not isinstance(value, bool):
                raise InvalidOptionsError(f"{name} must be a boolean, got {value!r}")
        precision = self.coordinate_precision
        if precision is not None:
            if isinstance(precision, bool) or not isinstance(precision, int):
                raise InvalidOptionsError(f"coordinate_precision must be an integer, got {precision!r}")
            if not 0 <= precision <= MAX_PRECISION:
                raise InvalidOptionsError(
                    f"coordinate_precision must be between 0 and {MAX_PRECISION}, got {precision}"
                )
        if self.preserve is not None and not isinstance(self.preserve, Preserve):
            raise InvalidOptionsError("preserve must be a Preserve instance")

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "OptimizationOptions":
        """Build options from a plain mapping (YAML, JSON, CLI)."""
        if data is None:
            return cls()
        if isinstance(data, cls):
            return data
        if not isinstance(data, dict):
            raise InvalidOptionsError(f"Options must be a mapping, got {type(data).__name__}")

        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise InvalidOptionsError(f"Unknown option(s): {', '.join(sorted(unknown))}")

        values = dict(data)
        if values.get("preserve") is not None:
            values["preserve"] = Preserve.from_dict(values["preserve"])
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        """Explicitly set fields only."""
        data = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            data[f.name] = value.to_dict() if isinstance(value, Preserve) else value
        return data

    def merged(self, override: "OptimizationOptions") -> "OptimizationOptions":
        """Return a copy where every explicit field of `override` wins."""
        changes = {f.name: getattr(override, f.name) for f in fields(override)}
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


@dataclass(frozen=True)
class ResolvedOptions:
    """Fully concrete settings handed to the passes."""

    aggressiveness: str
    remove_comments: bool
    remove_unnecessary_data: bool
    cleanup_defs: bool
    simplify_paths: bool
    coordinate_precision: int
    optimize_colors: bool
    minify: bool
    optimize_transforms: bool
    remove_empty_containers: bool
    inline_styles: bool
    remove_invisible_elements: bool
    preserve: Preserve = field(default_factory=Preserve)


def resolve_options(options: Optional[OptimizationOptions], tiers: Dict[str, dict]) -> ResolvedOptions:
    """
    Copy the tier bundle, then overwrite it field by field with explicit options.

    Args:
        options: Caller options (None for all defaults).
        tiers: Tier name -> default bundle, as loaded from configuration.
    """
    options = options or OptimizationOptions()
    aggressiveness = options.aggressiveness or DEFAULT_AGGRESSIVENESS
    if aggressiveness not in tiers:
        raise InvalidOptionsError(f"No defaults configured for tier '{aggressiveness}'")

    resolved = dict(tiers[aggressiveness])
    for f in fields(options):
        value = getattr(options, f.name)
        if value is not None:
            resolved[f.name] = value

    resolved["aggressiveness"] = aggressiveness
    resolved.setdefault("preserve", Preserve())

    missing = [f.name for f in fields(ResolvedOptions) if f.name not in resolved]
    if missing:
        raise InvalidOptionsError(f"Tier '{aggressiveness}' is missing: {', '.join(missing)}")

    known = {f.name for f in fields(ResolvedOptions)}
    return ResolvedOptions(**{k: v for k, v in resolved.items() if k in known})
