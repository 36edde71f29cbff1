"""Classify failures, suggest fixes and attempt best-effort repair."""
import re
import time
from collections import deque
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, Optional

from ..utils.logger import get_logger

logger = get_logger(__name__)

MAX_MESSAGE_LENGTH = 200

FILE_URL_RE = re.compile(r"file://\S*")
HTTP_URL_RE = re.compile(r"https?://\S*")
LINE_RE = re.compile(r"line (\d+)", re.IGNORECASE)
COLUMN_RE = re.compile(r"column (\d+)", re.IGNORECASE)
XML_PROLOG_RE = re.compile(r"^\s*<\?xml[^?]*\?>\s*")

RECOVERABLE_PARSE_PATTERNS = (
    re.compile(r"unclosed tag", re.IGNORECASE),
    re.compile(r"missing.*quote", re.IGNORECASE),
    re.compile(r"unexpected.*character", re.IGNORECASE),
    re.compile(r"invalid.*attribute", re.IGNORECASE),
)

RECOVERABLE_STEPS = frozenset({"minification", "attribute cleanup", "color optimization"})
FATAL_MARKERS = ("memory", "stack overflow", "maximum call stack", "recursion depth")

# Shape elements that are always empty and safe to self-close.
SELF_CLOSING_TAGS = ("circle", "ellipse", "line", "path", "rect", "use", "image")

UNQUOTED_ATTR_RE = re.compile(r"(\s[\w:-]+)=([^\"'\s>]+?)(?=\s|>|/>)")

SYNTHETIC_ROOT = '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 100 100">{}</svg>'


class ErrorType(str, Enum):
    PARSE_ERROR = "PARSE_ERROR"
    INVALID_SVG = "INVALID_SVG"
    OPTIMIZATION_FAILED = "OPTIMIZATION_FAILED"
    MEMORY_ERROR = "MEMORY_ERROR"
    TIMEOUT = "TIMEOUT"


@dataclass
class ErrorDetails:
    """A classified, user-safe description of a failure."""

    type: ErrorType
    message: str
    recoverable: bool
    suggestion: str = ""
    line: Optional[int] = None
    column: Optional[int] = None
    element: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["type"] = self.type.value
        return data


@dataclass(frozen=True)
class ErrorLogEntry:
    timestamp: float
    type: ErrorType
    recoverable: bool
    context: Optional[dict] = None


def sanitize_error_message(message: str) -> str:
    """Strip file paths and URLs and cap the length for display."""
    message = FILE_URL_RE.sub("[file path]", message)
    message = HTTP_URL_RE.sub("[url]", message)
    return message[:MAX_MESSAGE_LENGTH]


def format_bytes(num_bytes: float) -> str:
    if num_bytes < 1024:
        return f"{int(num_bytes)} B"
    if num_bytes < 1024 * 1024:
        return f"{num_bytes / 1024:.1f} KB"
    return f"{num_bytes / (1024 * 1024):.1f} MB"


class ErrorHandler:
    """
    Turn exceptions into ErrorDetails and keep a bounded log of them.

    One instance is owned per engine; the log is a ring buffer so memory
    stays flat no matter how many failures are seen.
    """

    def __init__(self, max_log_size: int = 100):
        self._error_log = deque(maxlen=max_log_size)

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def handle_parse_error(self, error: Exception, svg_content: str) -> ErrorDetails:
        raw = str(error)
        details = ErrorDetails(
            type=ErrorType.PARSE_ERROR,
            message=sanitize_error_message(raw),
            recoverable=self._is_recoverable_parse_error(raw),
            suggestion=self._parse_error_suggestion(raw),
        )

        details.line = getattr(error, "line", None)
        details.column = getattr(error, "column", None)
        if details.line is None:
            match = LINE_RE.search(raw)
            if match:
                details.line = int(match.group(1))
        if details.column is None:
            match = COLUMN_RE.search(raw)
            if match:
                details.column = int(match.group(1))

        self._log_error(details, {"svg_length": len(svg_content or "")})
        return details

    def handle_invalid_svg_error(self, reason: str, svg_content: str) -> ErrorDetails:
        details = ErrorDetails(
            type=ErrorType.INVALID_SVG,
            message=sanitize_error_message(f"Invalid SVG structure: {reason}"),
            recoverable=True,
            suggestion=self._structure_error_suggestion(reason),
        )
        self._log_error(details, {"svg_length": len(svg_content or ""), "reason": reason})
        return details

    def handle_optimization_error(self, error: BaseException, step: str) -> ErrorDetails:
        details = ErrorDetails(
            type=ErrorType.OPTIMIZATION_FAILED,
            message=sanitize_error_message(f"Optimization failed at {step}: {error}"),
            recoverable=self._is_recoverable_optimization_error(step, error),
            suggestion=self._optimization_error_suggestion(step, error),
        )
        self._log_error(details, {"step": step, "original_error": type(error).__name__})
        return details

    def handle_memory_error(self, available_bytes: int, required_bytes: int) -> ErrorDetails:
        details = ErrorDetails(
            type=ErrorType.MEMORY_ERROR,
            message=(
                f"Insufficient memory: need {format_bytes(required_bytes)}, "
                f"have {format_bytes(available_bytes)}"
            ),
            recoverable=True,
            suggestion="Try processing fewer files at once or split the document",
        )
        self._log_error(details, {"available": available_bytes, "required": required_bytes})
        return details

    def handle_timeout_error(self, duration_ms: float, operation: str) -> ErrorDetails:
        details = ErrorDetails(
            type=ErrorType.TIMEOUT,
            message=sanitize_error_message(
                f"Operation '{operation}' timed out after {int(duration_ms)}ms"
            ),
            recoverable=True,
            suggestion="Try simplifying the SVG or reducing optimization aggressiveness",
        )
        self._log_error(details, {"duration_ms": duration_ms, "operation": operation})
        return details

    # ------------------------------------------------------------------
    # Recovery
    # ------------------------------------------------------------------

    def attempt_recovery(self, svg_content: str, error: ErrorDetails) -> Optional[str]:
        """
        Try a textual repair for a recoverable error.

        Returns the patched document only if it now parses cleanly as an
        <svg>-rooted tree, otherwise None.
        """
        if not error.recoverable:
            return None

        if error.type == ErrorType.PARSE_ERROR:
            recovered = self._recover_from_parse_error(svg_content, error)
        elif error.type == ErrorType.INVALID_SVG:
            recovered = self._recover_from_invalid_svg(svg_content, error)
        else:
            return None

        if recovered is not None:
            logger.info(f"Recovered document after {error.type.value}")
        return recovered

    def _recover_from_parse_error(self, svg_content: str, error: ErrorDetails) -> Optional[str]:
        message = error.message.lower()
        recovered = svg_content

        if "quote" in message:
            recovered = fix_missing_quotes(recovered)
        if "unclosed tag" in message:
            recovered = fix_unclosed_tags(recovered)

        if _reparses_cleanly(recovered):
            return recovered

        if "unclosed tag" in message:
            # Last resort: let libxml2's recovering parser close what it can.
            from ..parsing.svg_parser import recover_markup

            repaired = recover_markup(recovered)
            if repaired is not None and _reparses_cleanly(repaired):
                return repaired

        logger.debug("Parse error recovery did not produce a valid document")
        return None

    def _recover_from_invalid_svg(self, svg_content: str, error: ErrorDetails) -> Optional[str]:
        if "root element" not in error.message:
            return None
        body = XML_PROLOG_RE.sub("", svg_content)
        if body.lstrip().startswith("<svg"):
            return None
        wrapped = SYNTHETIC_ROOT.format(body)
        return wrapped if _reparses_cleanly(wrapped) else None

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def get_error_statistics(self) -> Dict[str, Any]:
        total = len(self._error_log)
        by_type: Dict[str, int] = {}
        recoverable = 0

        for entry in self._error_log:
            by_type[entry.type.value] = by_type.get(entry.type.value, 0) + 1
            if entry.recoverable:
                recoverable += 1

        return {
            "total": total,
            "by_type": by_type,
            "recovery_rate": recoverable / total if total > 0 else 0.0,
        }

    @property
    def error_log(self):
        return list(self._error_log)

    def clear_error_log(self) -> None:
        self._error_log.clear()

    def _log_error(self, details: ErrorDetails, context: Optional[dict] = None) -> None:
        self._error_log.append(
            ErrorLogEntry(
                timestamp=time.time(),
                type=details.type,
                recoverable=details.recoverable,
                context=context,
            )
        )
        logger.debug(f"{details.type.value}: {details.message}")

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    @staticmethod
    def _is_recoverable_parse_error(message: str) -> bool:
        return any(pattern.search(message) for pattern in RECOVERABLE_PARSE_PATTERNS)

    @staticmethod
    def _parse_error_suggestion(message: str) -> str:
        if re.search(r"unclosed tag", message, re.IGNORECASE):
            return "Check for missing closing tags in your SVG"
        if re.search(r"missing.*quote", message, re.IGNORECASE):
            return "Check for missing quotes around attribute values"
        if re.search(r"invalid.*attribute", message, re.IGNORECASE):
            return "Check for invalid or malformed attributes"
        if re.search(r"empty", message, re.IGNORECASE):
            return "Provide a non-empty SVG document"
        return "Validate your SVG syntax using an XML validator"

    @staticmethod
    def _structure_error_suggestion(reason: str) -> str:
        if "root element" in reason:
            return "Ensure your document has a valid <svg> root element"
        if "viewBox" in reason:
            return "Consider adding a viewBox attribute for better scalability"
        return "Check that your SVG follows the SVG specification"

    @staticmethod
    def _is_recoverable_optimization_error(step: str, error: BaseException) -> bool:
        if isinstance(error, (MemoryError, RecursionError)):
            return False
        message = str(error).lower()
        return step in RECOVERABLE_STEPS and not any(m in message for m in FATAL_MARKERS)

    @staticmethod
    def _optimization_error_suggestion(step: str, error: BaseException) -> str:
        if step == "path simplification":
            return "Try reducing coordinate precision or disabling path simplification"
        if step == "color optimization":
            return "Try disabling color optimization for this SVG"
        if isinstance(error, MemoryError) or "memory" in str(error).lower():
            return "Process fewer files at once or reduce optimization aggressiveness"
        return "Try using less aggressive optimization settings"


def fix_unclosed_tags(svg_content: str) -> str:
    """Self-close shape tags written as `<circle ...>` with no end tag."""
    fixed = svg_content
    for tag in SELF_CLOSING_TAGS:
        if f"</{tag}>" in fixed:
            continue
        fixed = re.sub(rf"<{tag}\b([^>]*?)(?<!/)>", rf"<{tag}\1/>", fixed)
    return fixed


def fix_missing_quotes(svg_content: str) -> str:
    """Quote bare attribute values: `r=5` -> `r="5"`."""
    return UNQUOTED_ATTR_RE.sub(r'\1="\2"', svg_content)


def _reparses_cleanly(svg_content: str) -> bool:
    from ..parsing.svg_parser import parse_svg
    from .exceptions import SvgError

    try:
        parse_svg(svg_content, require_svg_root=True)
    except SvgError:
        return False
    return True
