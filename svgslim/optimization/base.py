"""Pass interface and the fixed pass order."""
from typing import List, Optional

from lxml import etree

from .options import ResolvedOptions
from .report import OptimizationReport


class OptimizationPass:
    """
    One self-contained tree transformation.

    Subclasses set `step` (the label used in error classification) and
    `option` (the ResolvedOptions toggle that enables them, or None if the
    pass always runs). Running a pass twice must change nothing the second time.
    """

    step: str = ""
    option: Optional[str] = None

    def enabled(self, options: ResolvedOptions) -> bool:
        return self.option is None or bool(getattr(options, self.option))

    def run(self, root: etree._Element, options: ResolvedOptions, report: OptimizationReport) -> None:
        raise NotImplementedError


def default_passes() -> List[OptimizationPass]:
    """
    Passes in execution order.

    Rounding runs after path simplification so simplification sees full
    precision; cleanup passes run before color and geometry passes so they
    never touch nodes that are about to be deleted.
    """
    from .cleanup import (
        CommentRemover,
        DefaultAttributePruner,
        DefinitionCleaner,
        EmptyContainerRemover,
        InvisibleElementRemover,
    )
    from .colors import ColorOptimizer
    from .coordinates import CoordinateRounder
    from .path_simplifier import PathSimplifier
    from .styles import StyleInliner
    from .transforms import TransformOptimizer

    return [
        CommentRemover(),
        StyleInliner(),
        DefaultAttributePruner(),
        DefinitionCleaner(),
        InvisibleElementRemover(),
        EmptyContainerRemover(),
        ColorOptimizer(),
        PathSimplifier(),
        TransformOptimizer(),
        CoordinateRounder(),
    ]
