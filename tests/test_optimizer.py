"""End-to-end tests for SVGOptimizer.optimize and friends."""
import time

import pytest

from svgslim.errors.handler import ErrorType
from svgslim.optimization.base import OptimizationPass, default_passes
from svgslim.optimization.options import OptimizationOptions, Preserve
from svgslim.optimizer import SVGOptimizer

from .conftest import SVG_NS


class ExplodingPass(OptimizationPass):
    step = "color optimization"
    option = None

    def run(self, root, options, report):
        report.colors_optimized += 1
        raise ValueError("bad numeric literal")


class SlowPass(OptimizationPass):
    step = "path simplification"
    option = None

    def run(self, root, options, report):
        time.sleep(0.5)


class TestOptimize:
    """The single-document pipeline."""

    def test_removes_comment_and_default_attribute(self, optimizer, simple_svg):
        result = optimizer.optimize(simple_svg, {"aggressiveness": "moderate"})
        assert result.success
        assert "<!--" not in result.optimized_svg
        assert 'opacity="1.0"' not in result.optimized_svg
        assert result.optimized_size < result.original_size
        assert result.report.elements_removed >= 1
        assert result.report.attributes_removed >= 1

    def test_empty_input(self, optimizer):
        result = optimizer.optimize("")
        assert not result.success
        assert result.optimized_svg is None
        assert "empty" in result.error.lower()
        assert result.error_details.type == ErrorType.PARSE_ERROR

    def test_non_string_input(self, optimizer):
        result = optimizer.optimize(None)
        assert not result.success

    def test_unclosed_tag(self, optimizer):
        text = '<svg><circle r="1"'
        assert optimizer.validate(text).is_valid is False
        result = optimizer.optimize(text)
        assert not result.success
        assert result.error_details.type == ErrorType.PARSE_ERROR
        assert result.error_details.recoverable

    def test_identity_transforms_removed(self, optimizer):
        text = (
            f'<svg {SVG_NS}><g transform="translate(0,0) scale(1.0)">'
            '<rect x="0" y="0" width="10" height="10"/></g></svg>'
        )
        result = optimizer.optimize(text, OptimizationOptions(optimize_transforms=True))
        assert result.success
        assert "transform" not in result.optimized_svg
        assert result.report.transforms_optimized >= 1

    def test_non_svg_root(self, optimizer):
        result = optimizer.optimize("<g><rect/></g>")
        assert not result.success
        assert result.error_details.type == ErrorType.INVALID_SVG

    def test_recover_wraps_fragment(self, optimizer):
        result = optimizer.optimize('<g><rect width="1" height="1"/></g>', recover=True)
        assert result.success
        assert result.optimized_svg.startswith("<svg")

    def test_recover_closes_shape_tags(self, optimizer):
        result = optimizer.optimize(f'<svg {SVG_NS}><circle r="1"></svg>', recover=True)
        assert result.success
        assert "<circle" in result.optimized_svg

    def test_sizes_are_utf8_bytes(self, optimizer):
        text = "<svg><text>héllo</text></svg>"
        result = optimizer.optimize(text, {"aggressiveness": "conservative"})
        assert result.original_size == len(text.encode("utf-8"))
        assert result.compression_ratio == pytest.approx(result.optimized_size / result.original_size)

    def test_aggressive_rounding_keeps_packed_curve_arguments(self, optimizer):
        svg = f'<svg {SVG_NS}><path d="M1 1c1.2-0.04 3 4 5 6z"/></svg>'
        result = optimizer.optimize(svg, {"aggressiveness": "aggressive"})
        assert result.success
        assert 'd="M1 1c1.2 0 3 4 5 6z"' in result.optimized_svg

    def test_timings_reported(self, optimizer, verbose_svg):
        result = optimizer.optimize(verbose_svg)
        assert result.processing_time_ms >= 0
        assert "comment removal" in result.report.pass_times_ms
        assert "coordinate rounding" in result.report.pass_times_ms

    def test_conservative_keeps_everything_but_rounds(self, optimizer, verbose_svg):
        result = optimizer.optimize(verbose_svg, {"aggressiveness": "conservative"})
        assert result.success
        assert "<!--" in result.optimized_svg
        assert 'id="unused"' in result.optimized_svg
        assert "rgb(255, 0, 0)" in result.optimized_svg
        assert 'x="10.12346"' in result.optimized_svg

    def test_moderate_full_document(self, optimizer, verbose_svg):
        result = optimizer.optimize(verbose_svg)
        svg = result.optimized_svg
        assert result.success
        assert 'id="unused"' not in svg
        assert 'id="used"' in svg
        assert "rgb(" not in svg and "rgba(" not in svg
        assert 'fill="#ff0000"' in svg
        assert 'stop-color="#0000ff"' in svg
        assert "transform" not in svg
        assert "<g/>" not in svg and "<g></g>" not in svg
        assert 'x="10.123"' in svg
        assert "\n" not in svg

    def test_explicit_field_beats_tier(self, optimizer, verbose_svg):
        result = optimizer.optimize(verbose_svg, {"aggressiveness": "moderate", "remove_comments": False})
        assert "<!--" in result.optimized_svg
        assert "\n" not in result.optimized_svg

    def test_preserve_attributes(self, optimizer, simple_svg):
        result = optimizer.optimize(
            simple_svg, OptimizationOptions(preserve=Preserve(attributes=("opacity",)))
        )
        assert 'opacity="1.0"' in result.optimized_svg

    def test_preset(self, optimizer, verbose_svg):
        result = optimizer.optimize(verbose_svg, preset="conservative")
        assert result.success
        assert "<!--" not in result.optimized_svg
        assert 'x="10.123"' in result.optimized_svg

    def test_unknown_preset(self, optimizer, simple_svg):
        result = optimizer.optimize(simple_svg, preset="nope")
        assert not result.success
        assert "nope" in result.error

    def test_invalid_options(self, optimizer, simple_svg):
        result = optimizer.optimize(simple_svg, {"coordinate_precision": -1})
        assert not result.success
        assert "coordinate_precision" in result.error

    def test_input_too_large(self, simple_svg):
        optimizer = SVGOptimizer(config={"limits": {"max_input_bytes": 50}})
        result = optimizer.optimize(simple_svg)
        assert not result.success
        assert result.error_details.type == ErrorType.MEMORY_ERROR

    def test_pass_failure_aborts_call(self, simple_svg):
        optimizer = SVGOptimizer(passes=[ExplodingPass()])
        result = optimizer.optimize(simple_svg)
        assert not result.success
        assert result.report is None
        assert result.error.startswith("Optimization failed at color optimization")
        assert result.error_details.type == ErrorType.OPTIMIZATION_FAILED
        assert result.error_details.recoverable

    def test_errors_are_logged_per_engine(self, simple_svg):
        first, second = SVGOptimizer(), SVGOptimizer()
        first.optimize("")
        assert first.error_handler.get_error_statistics()["total"] == 1
        assert second.error_handler.get_error_statistics()["total"] == 0


class TestProperties:
    """Determinism, idempotence and validity of the output."""

    @pytest.mark.parametrize("tier", ["conservative", "moderate", "aggressive"])
    def test_deterministic(self, optimizer, verbose_svg, tier):
        first = optimizer.optimize(verbose_svg, {"aggressiveness": tier})
        second = optimizer.optimize(verbose_svg, {"aggressiveness": tier})
        assert first.optimized_svg == second.optimized_svg

    @pytest.mark.parametrize("tier", ["conservative", "moderate", "aggressive"])
    def test_idempotent(self, optimizer, verbose_svg, tier):
        once = optimizer.optimize(verbose_svg, {"aggressiveness": tier})
        twice = optimizer.optimize(once.optimized_svg, {"aggressiveness": tier})
        assert twice.success
        assert twice.optimized_size >= once.optimized_size * 0.99

    @pytest.mark.parametrize("tier", ["moderate", "aggressive"])
    def test_output_is_valid(self, optimizer, verbose_svg, tier):
        result = optimizer.optimize(verbose_svg, {"aggressiveness": tier})
        assert optimizer.validate(result.optimized_svg).is_valid

    @pytest.mark.parametrize("tier", ["moderate", "aggressive"])
    def test_shrinks(self, optimizer, verbose_svg, tier):
        result = optimizer.optimize(verbose_svg, {"aggressiveness": tier})
        assert result.optimized_size < result.original_size

    def test_rounding_is_not_a_visible_change(self, optimizer):
        original = (
            f'<svg {SVG_NS} viewBox="0 0 100 100">'
            '<circle cx="50.123456" cy="49.98765" r="40.00012" fill="#ff0000"/>'
            '<rect x="1.23456" y="2.34567" width="10.98765" height="20.01234"/>'
            '<path d="M 1.23456 2.34567 L 50.98765 60.12345"/></svg>'
        )
        result = optimizer.optimize(original, {"aggressiveness": "moderate"})
        assert result.report.coordinates_rounded > 0
        assert optimizer.compare(original, result.optimized_svg).has_visible_changes is False


class TestTimeout:
    """optimize_with_timeout."""

    def test_fast_call_passes_through(self, optimizer, simple_svg):
        result = optimizer.optimize_with_timeout(simple_svg)
        assert result.success

    def test_slow_call_times_out(self, simple_svg):
        optimizer = SVGOptimizer(passes=[SlowPass()])
        result = optimizer.optimize_with_timeout(simple_svg, timeout_ms=50)
        assert not result.success
        assert result.optimized_svg is None
        assert result.error_details.type == ErrorType.TIMEOUT


class TestStats:
    def test_get_stats(self, optimizer, verbose_svg):
        result = optimizer.optimize(verbose_svg)
        stats = optimizer.get_stats(verbose_svg, result.optimized_svg)
        assert stats["reduction_bytes"] == result.original_size - result.optimized_size
        assert stats["original_elements"] > stats["optimized_elements"]

    def test_default_pass_order(self):
        steps = [p.step for p in default_passes()]
        assert steps.index("path simplification") < steps.index("coordinate rounding")
        assert steps.index("comment removal") < steps.index("attribute cleanup")
        assert steps.index("definition cleanup") < steps.index("container cleanup")
        assert steps.index("color optimization") < steps.index("path simplification")
