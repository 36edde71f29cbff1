"""Main engine that ties parsing, the pass pipeline and reporting together."""
import time
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from .analysis.complexity import ComplexityAnalysis, ComplexityAnalyzer
from .comparison.fingerprint import FingerprintComparator, VisualDifference
from .comparison.preview import PreviewComparison, generate_comparison
from .errors.boundary import OperationBoundary
from .errors.exceptions import (
    InvalidOptionsError,
    OperationFailedError,
    ParseError,
    PresetNotFoundError,
    SvgTimeoutError,
    SvgValidationError,
)
from .errors.handler import ErrorDetails, ErrorHandler
from .optimization.base import OptimizationPass, default_passes
from .optimization.options import OptimizationOptions, ResolvedOptions, resolve_options
from .optimization.report import OptimizationReport, OptimizationResult
from .parsing.svg_parser import SVGParser
from .parsing.tree import descendant_elements
from .presets.registry import PresetRegistry
from .utils.config import load_config
from .utils.logger import get_logger
from .validation.validator import SVGValidator, ValidationResult

logger = get_logger(__name__)

OptionsLike = Union[OptimizationOptions, Dict[str, Any], None]


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000.0


class SVGOptimizer:
    """
    Complete SVG optimization engine.

    Pipeline:
      1. Check input (non-empty, within the size budget)
      2. Resolve options (preset, tier defaults, explicit overrides)
      3. Parse text into a fresh tree
      4. Run the enabled passes in fixed order
      5. Serialize (and minify)
      6. Report sizes, ratio and per-pass timings

    Each instance owns its preset registry and error log; nothing is shared
    between engines.
    """

    def __init__(
        self,
        config: dict = None,
        config_path: str = None,
        passes: Optional[Sequence[OptimizationPass]] = None,
    ):
        """
        Initialize with a config dict and/or a YAML path.

        Args:
            config: Overrides deep-merged over the packaged defaults.
            config_path: Path to a YAML file merged before `config`.
            passes: Replacement pass list, mainly for tests.
        """
        self.config = load_config(config, config_path)

        limits = self.config.get("limits", {})
        self.max_input_bytes = int(limits.get("max_input_bytes", 20 * 1024 * 1024))
        self.timeout_ms = float(limits.get("timeout_ms", 30000))

        self.parser = SVGParser()
        self.error_handler = ErrorHandler(int(limits.get("error_log_size", 100)))
        self.presets = PresetRegistry(self.config)
        self.validator = SVGValidator(self.parser)
        self.analyzer = ComplexityAnalyzer(self.config, self.parser)
        self.comparator = FingerprintComparator(self.config)
        self.passes: List[OptimizationPass] = list(passes) if passes is not None else default_passes()

    # ------------------------------------------------------------------
    # Options
    # ------------------------------------------------------------------

    def resolve_options(self, options: OptionsLike = None, preset: Optional[str] = None) -> ResolvedOptions:
        """
        Preset first, then explicit options on top, then tier defaults underneath.

        Raises:
            InvalidOptionsError: Malformed options.
            PresetNotFoundError: Unknown preset name.
        """
        explicit = OptimizationOptions.from_dict(options)
        if preset:
            explicit = self.presets.get(preset).merged(explicit)
        return resolve_options(explicit, self.config.get("tiers", {}))

    # ------------------------------------------------------------------
    # Optimization
    # ------------------------------------------------------------------

    def optimize(
        self,
        svg_string: str,
        options: OptionsLike = None,
        preset: Optional[str] = None,
        recover: bool = False,
    ) -> OptimizationResult:
        """
        Optimize one document. Never raises; failures come back as success=False.

        Args:
            svg_string: Complete SVG document text.
            options: OptimizationOptions or a plain dict of them.
            preset: Name of a registered preset applied under `options`.
            recover: Try a textual repair when the input fails to parse.
        """
        start = time.perf_counter()

        if not isinstance(svg_string, str) or not svg_string.strip():
            error = ParseError("Empty SVG content", kind="empty content")
            details = self.error_handler.handle_parse_error(error, "")
            logger.warning("Rejected empty SVG content")
            return OptimizationResult.failure(0, details.message, _elapsed_ms(start), details)

        original_size = len(svg_string.encode("utf-8"))
        if original_size > self.max_input_bytes:
            details = self.error_handler.handle_memory_error(self.max_input_bytes, original_size)
            logger.warning(details.message)
            return OptimizationResult.failure(original_size, details.message, _elapsed_ms(start), details)

        try:
            resolved = self.resolve_options(options, preset)
        except (InvalidOptionsError, PresetNotFoundError) as e:
            logger.warning(f"Invalid options: {e}")
            return OptimizationResult.failure(original_size, str(e), _elapsed_ms(start))

        logger.info(f"Optimizing {original_size} bytes (tier: {resolved.aggressiveness})")
        report = OptimizationReport()

        # --- Parse ---
        step_start = time.perf_counter()
        root, details = self._parse(svg_string, recover)
        report.parse_time_ms = _elapsed_ms(step_start)
        if root is None:
            return OptimizationResult.failure(original_size, details.message, _elapsed_ms(start), details)

        # --- Passes ---
        step_start = time.perf_counter()
        for optimization_pass in self.passes:
            if not optimization_pass.enabled(resolved):
                continue
            pass_start = time.perf_counter()
            try:
                optimization_pass.run(root, resolved, report)
            except Exception as e:
                details = self.error_handler.handle_optimization_error(e, optimization_pass.step)
                logger.error(details.message)
                return OptimizationResult.failure(original_size, details.message, _elapsed_ms(start), details)
            report.pass_times_ms[optimization_pass.step] = _elapsed_ms(pass_start)
        report.optimization_time_ms = _elapsed_ms(step_start)

        # --- Serialize ---
        step_start = time.perf_counter()
        step = "minification"
        try:
            if resolved.minify:
                self.parser.minify(root, preserve_attributes=resolved.preserve.attributes)
            step = "serialization"
            optimized_svg = self.parser.serialize(root)
        except Exception as e:
            details = self.error_handler.handle_optimization_error(e, step)
            logger.error(details.message)
            return OptimizationResult.failure(original_size, details.message, _elapsed_ms(start), details)
        report.serialization_time_ms = _elapsed_ms(step_start)

        optimized_size = len(optimized_svg.encode("utf-8"))
        result = OptimizationResult(
            success=True,
            original_size=original_size,
            optimized_size=optimized_size,
            compression_ratio=optimized_size / original_size,
            processing_time_ms=_elapsed_ms(start),
            optimized_svg=optimized_svg,
            report=report,
        )
        logger.info(
            f"Optimized {original_size} -> {optimized_size} bytes "
            f"({result.saved_percent:.1f}% saved, {result.processing_time_ms:.1f}ms)"
        )
        return result

    def _parse(self, svg_string: str, recover: bool):
        """Return (root, None) or (None, ErrorDetails)."""
        try:
            return self.parser.parse(svg_string, require_svg_root=True), None
        except ParseError as e:
            details = self.error_handler.handle_parse_error(e, svg_string)
        except SvgValidationError as e:
            details = self.error_handler.handle_invalid_svg_error(str(e), svg_string)

        logger.warning(f"{details.type.value}: {details.message}")
        if recover:
            repaired = self.error_handler.attempt_recovery(svg_string, details)
            if repaired is not None:
                return self.parser.parse(repaired, require_svg_root=True), None
        return None, details

    def optimize_with_timeout(
        self,
        svg_string: str,
        options: OptionsLike = None,
        preset: Optional[str] = None,
        timeout_ms: Optional[float] = None,
        recover: bool = False,
    ) -> OptimizationResult:
        """Like optimize(), but a run slower than `timeout_ms` yields a TIMEOUT failure."""
        start = time.perf_counter()
        boundary = OperationBoundary(self.error_handler, timeout_ms or self.timeout_ms)
        original_size = len(svg_string.encode("utf-8")) if isinstance(svg_string, str) else 0
        try:
            return boundary.execute(
                lambda: self.optimize(svg_string, options, preset, recover=recover), "optimize"
            )
        except (SvgTimeoutError, OperationFailedError) as e:
            return OptimizationResult.failure(original_size, e.message, _elapsed_ms(start), e.details)

    def process_batch(
        self,
        documents: Sequence[str],
        options: OptionsLike = None,
        preset: Optional[str] = None,
        on_progress: Optional[Callable] = None,
        cancel_event=None,
        names: Optional[Sequence[str]] = None,
        timeout_ms: Optional[float] = None,
        recover: bool = False,
    ) -> List[OptimizationResult]:
        """Optimize documents one after another. See BatchProcessor."""
        from .batch.processor import BatchProcessor

        processor = BatchProcessor(self)
        return processor.process_batch(
            documents,
            options=options,
            preset=preset,
            on_progress=on_progress,
            cancel_event=cancel_event,
            names=names,
            timeout_ms=timeout_ms,
            recover=recover,
        )

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    def validate(self, svg_string: str) -> ValidationResult:
        return self.validator.validate(svg_string)

    def analyze(self, svg_string: str) -> ComplexityAnalysis:
        return self.analyzer.analyze(svg_string)

    def compare(self, original: str, optimized: str) -> VisualDifference:
        return self.comparator.compare(original, optimized)

    def generate_comparison(self, original: str, optimized: str) -> PreviewComparison:
        return generate_comparison(original, optimized, self.analyzer, self.comparator)

    def attempt_recovery(self, svg_string: str, details: ErrorDetails) -> Optional[str]:
        return self.error_handler.attempt_recovery(svg_string, details)

    def get_stats(self, original: str, optimized: str) -> Dict[str, Any]:
        """Byte sizes, reduction and element counts for a before/after pair."""
        original_size = len(original.encode("utf-8"))
        optimized_size = len(optimized.encode("utf-8"))
        reduction = original_size - optimized_size
        return {
            "original_size": original_size,
            "optimized_size": optimized_size,
            "reduction_bytes": reduction,
            "reduction_percent": (reduction / original_size * 100.0) if original_size else 0.0,
            "original_elements": self._count_elements(original),
            "optimized_elements": self._count_elements(optimized),
        }

    def _count_elements(self, svg_string: str) -> int:
        try:
            root = self.parser.parse(svg_string)
        except ParseError:
            return 0
        return len(descendant_elements(root)) + 1
