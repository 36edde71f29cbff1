"""Sequential multi-document optimization with progress and cancellation."""
import threading
import time
from dataclasses import dataclass, asdict
from typing import Callable, List, Optional, Sequence

from ..optimization.report import OptimizationResult
from ..utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class BatchProgress:
    total_files: int
    completed_files: int
    current_file: str
    overall_progress: float
    current_file_progress: float
    total_size_reduction: int
    average_compression_ratio: float

    def to_dict(self):
        return asdict(self)


class BatchProcessor:
    """
    Drive an SVGOptimizer over many documents, one at a time.

    Results are returned in input order. A failing document becomes a
    failed entry and the batch moves on. Cancellation is checked between
    documents only; a cancelled batch returns the results gathered so far.
    """

    def __init__(self, optimizer):
        self.optimizer = optimizer
        self._abort = threading.Event()

    def abort(self) -> None:
        """Stop before the next document."""
        self._abort.set()

    def process_batch(
        self,
        documents: Sequence[str],
        options=None,
        preset: Optional[str] = None,
        on_progress: Optional[Callable[[BatchProgress], None]] = None,
        cancel_event: Optional[threading.Event] = None,
        names: Optional[Sequence[str]] = None,
        timeout_ms: Optional[float] = None,
        recover: bool = False,
    ) -> List[OptimizationResult]:
        """
        Optimize `documents` in order.

        With `timeout_ms`, each document gets its own time limit; `recover`
        is passed to every optimize call.

        Raises:
            InvalidOptionsError, PresetNotFoundError: Before any document is
                processed, if the options or preset are unusable.
        """
        # Fail fast on bad call setup; per-document failures never raise.
        self.optimizer.resolve_options(options, preset)
        self._abort.clear()

        total = len(documents)
        names = list(names) if names is not None else [f"document-{i + 1}" for i in range(total)]
        results: List[OptimizationResult] = []
        total_reduction = 0
        ratios: List[float] = []

        def report(current: str, file_progress: float) -> None:
            if on_progress is None:
                return
            progress = BatchProgress(
                total_files=total,
                completed_files=len(results),
                current_file=current,
                overall_progress=(len(results) / total * 100.0) if total else 100.0,
                current_file_progress=file_progress,
                total_size_reduction=total_reduction,
                average_compression_ratio=(sum(ratios) / len(ratios)) if ratios else 0.0,
            )
            try:
                on_progress(progress)
            except Exception as e:
                logger.warning(f"Progress callback failed: {e}")

        logger.info(f"Processing batch of {total} documents")
        for index, document in enumerate(documents):
            if self._cancelled(cancel_event):
                logger.info(f"Batch cancelled after {len(results)}/{total} documents")
                break

            name = names[index] if index < len(names) else f"document-{index + 1}"
            report(name, 0.0)

            start = time.perf_counter()
            try:
                result = self._optimize_one(document, options, preset, timeout_ms, recover)
            except Exception as e:
                details = self.optimizer.error_handler.handle_optimization_error(e, "optimize")
                logger.error(f"{name}: {details.message}")
                size = len(document.encode("utf-8")) if isinstance(document, str) else 0
                result = OptimizationResult.failure(
                    size, details.message, (time.perf_counter() - start) * 1000.0, details
                )

            results.append(result)
            if result.success:
                total_reduction += result.original_size - result.optimized_size
                ratios.append(result.compression_ratio)
            else:
                logger.warning(f"{name}: {result.error}")

            report(name, 100.0)

        successes = sum(1 for r in results if r.success)
        logger.info(f"Batch finished: {successes}/{len(results)} succeeded, {total_reduction} bytes saved")
        return results

    def _optimize_one(self, document, options, preset, timeout_ms, recover) -> OptimizationResult:
        if timeout_ms:
            return self.optimizer.optimize_with_timeout(
                document, options, preset, timeout_ms, recover=recover
            )
        return self.optimizer.optimize(document, options, preset, recover=recover)

    def _cancelled(self, cancel_event: Optional[threading.Event]) -> bool:
        return self._abort.is_set() or (cancel_event is not None and cancel_event.is_set())
