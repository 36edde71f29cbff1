"""Tests for the individual optimization passes."""
import pytest

from svgslim.optimization.cleanup import (
    CommentRemover,
    DefaultAttributePruner,
    DefinitionCleaner,
    EmptyContainerRemover,
    InvisibleElementRemover,
)
from svgslim.optimization.colors import ColorOptimizer
from svgslim.optimization.coordinates import CoordinateRounder, round_length
from svgslim.optimization.options import Preserve
from svgslim.optimization.path_simplifier import PathSimplifier
from svgslim.optimization.styles import StyleInliner
from svgslim.optimization.transforms import TransformOptimizer, fold_transform
from svgslim.parsing.svg_parser import serialize_svg
from svgslim.parsing.tree import descendant_elements, iter_comments, localname
from svgslim.utils.numbers import format_number, round_numbers


def tags(root):
    return [localname(el.tag) for el in descendant_elements(root)]


class TestCommentRemover:
    """Comment removal."""

    def test_removes_comments(self, run_pass):
        root, report = run_pass(CommentRemover(), "<svg><!-- a --><rect/><!-- b --></svg>")
        assert list(iter_comments(root)) == []
        assert report.elements_removed == 2

    def test_preserved_comment_survives(self, run_pass):
        root, report = run_pass(
            CommentRemover(),
            "<svg><!-- license: MIT --><!-- junk --><rect/></svg>",
            preserve=Preserve(comments=("license",)),
        )
        assert [c.text for c in iter_comments(root)] == [" license: MIT "]
        assert report.elements_removed == 1


class TestDefaultAttributePruner:
    """Default-attribute pruning."""

    @pytest.mark.parametrize("attr,value", [
        ("opacity", "1"),
        ("opacity", "1.0"),
        ("opacity", "1.00"),
        ("stroke-width", "1"),
        ("fill-opacity", "1.0"),
        ("stroke-opacity", "1"),
    ])
    def test_removes_no_op_values(self, run_pass, attr, value):
        root, report = run_pass(DefaultAttributePruner(), f'<svg><rect {attr}="{value}"/></svg>')
        assert root[0].get(attr) is None
        assert report.attributes_removed == 1

    def test_keeps_real_values(self, run_pass):
        root, report = run_pass(DefaultAttributePruner(), '<svg><rect opacity="0.5" stroke-width="2"/></svg>')
        assert root[0].get("opacity") == "0.5"
        assert report.attributes_removed == 0

    def test_keeps_default_that_resets_inherited_value(self, run_pass):
        root, report = run_pass(
            DefaultAttributePruner(),
            '<svg><g stroke-width="3"><path d="M0 0L1 1" stroke-width="1"/></g></svg>',
        )
        assert root[0][0].get("stroke-width") == "1"
        assert report.attributes_removed == 0

    def test_preserved_attribute(self, run_pass):
        root, _ = run_pass(
            DefaultAttributePruner(),
            '<svg><rect opacity="1"/></svg>',
            preserve=Preserve(attributes=("opacity",)),
        )
        assert root[0].get("opacity") == "1"


class TestDefinitionCleaner:
    """Dead-definition elimination."""

    def test_removes_unreferenced_definitions(self, run_pass):
        root, report = run_pass(
            DefinitionCleaner(),
            '<svg><defs><linearGradient id="used"/><linearGradient id="unused"/></defs>'
            '<rect fill="url(#used)"/></svg>',
        )
        assert [el.get("id") for el in root[0]] == ["used"]
        assert report.elements_removed == 1

    def test_removes_empty_defs(self, run_pass):
        root, report = run_pass(
            DefinitionCleaner(), '<svg><defs><clipPath id="c"/></defs><rect/></svg>'
        )
        assert tags(root) == ["rect"]
        assert report.elements_removed == 2

    def test_follows_href_chains_to_fixpoint(self, run_pass):
        root, report = run_pass(
            DefinitionCleaner(),
            '<svg><defs><linearGradient id="a"/><linearGradient id="b" href="#a"/></defs>'
            "<rect/></svg>",
        )
        assert tags(root) == ["rect"]
        assert report.elements_removed == 3

    @pytest.mark.parametrize("reference", [
        'stroke="url(#g)"',
        'clip-path="url(#g)"',
        'mask="url(\'#g\')"',
        'filter="url(#g)"',
        'style="fill:url(#g)"',
    ])
    def test_reference_attributes(self, run_pass, reference):
        root, report = run_pass(
            DefinitionCleaner(), f'<svg><defs><filter id="g"/></defs><rect {reference}/></svg>'
        )
        assert report.elements_removed == 0

    def test_xlink_href_counts_as_reference(self, run_pass):
        svg = (
            '<svg xmlns:xlink="http://www.w3.org/1999/xlink"><defs><path id="p" d="M0 0"/></defs>'
            '<use xlink:href="#p"/></svg>'
        )
        _, report = run_pass(DefinitionCleaner(), svg)
        assert report.elements_removed == 0

    def test_definitions_without_id_stay(self, run_pass):
        _, report = run_pass(DefinitionCleaner(), "<svg><defs><style>rect{}</style></defs></svg>")
        assert report.elements_removed == 0


class TestEmptyContainerRemover:
    """Empty-container pruning."""

    def test_removes_nested_empty_groups(self, run_pass):
        root, report = run_pass(EmptyContainerRemover(), "<svg><g><g></g>\n</g><rect/></svg>")
        assert tags(root) == ["rect"]
        assert report.elements_removed == 2

    def test_keeps_groups_with_content(self, run_pass):
        root, report = run_pass(EmptyContainerRemover(), "<svg><g><rect/></g></svg>")
        assert tags(root) == ["g", "rect"]
        assert report.elements_removed == 0

    def test_preserved_groups(self, run_pass):
        root, _ = run_pass(
            EmptyContainerRemover(), "<svg><g/></svg>", preserve=Preserve(elements=("g",))
        )
        assert tags(root) == ["g"]


class TestInvisibleElementRemover:
    """Invisible element removal."""

    def test_removes_invisible_shapes(self, run_pass):
        root, report = run_pass(
            InvisibleElementRemover(),
            '<svg><circle r="0"/><rect width="0" height="5"/><path d="M0 0" display="none"/>'
            '<rect width="5" height="5" opacity="0"/><ellipse rx="1" ry="1" visibility="hidden"/>'
            '<rect width="5" height="5"/></svg>',
        )
        assert tags(root) == ["rect"]
        assert report.elements_removed == 5

    def test_keeps_referenced_and_non_rendered(self, run_pass):
        root, report = run_pass(
            InvisibleElementRemover(),
            '<svg><defs><rect id="r" width="0"/><rect width="0"/></defs><rect id="x" width="0"/></svg>',
        )
        assert report.elements_removed == 0

    def test_hidden_group_may_hold_visible_children(self, run_pass):
        _, report = run_pass(
            InvisibleElementRemover(),
            '<svg><g visibility="hidden"><rect width="1" height="1" visibility="visible"/></g></svg>',
        )
        assert report.elements_removed == 0


class TestStyleInliner:
    """Style inlining."""

    def test_moves_presentation_properties(self, run_pass):
        root, _ = run_pass(
            StyleInliner(), '<svg><rect style="fill: red; cursor: pointer"/></svg>', inline_styles=True
        )
        rect = root[0]
        assert rect.get("fill") == "red"
        assert rect.get("style") == "cursor:pointer"

    def test_style_overrides_attribute(self, run_pass):
        root, _ = run_pass(StyleInliner(), '<svg><rect fill="blue" style="fill:red"/></svg>')
        assert root[0].get("fill") == "red"
        assert root[0].get("style") is None

    def test_important_declarations_stay(self, run_pass):
        root, _ = run_pass(StyleInliner(), '<svg><rect style="fill:red !important"/></svg>')
        assert root[0].get("style") == "fill:red !important"
        assert root[0].get("fill") is None

    def test_skipped_with_style_sheet(self, run_pass):
        root, _ = run_pass(
            StyleInliner(), '<svg><style>rect{fill:blue}</style><rect style="fill:red"/></svg>'
        )
        assert root[1].get("style") == "fill:red"


class TestColorOptimizer:
    """Color canonicalization."""

    @pytest.mark.parametrize("value,expected", [
        ("rgb(255, 0, 0)", "#ff0000"),
        ("rgb(0,128,255)", "#0080ff"),
        ("rgba(0, 0, 255, 1)", "#0000ff"),
        ("rgba(0,0,255,1.0)", "#0000ff"),
        ("rgba(0, 0, 255, 0.5)", "rgba(0, 0, 255, 0.5)"),
        ("red", "red"),
        ("#ABC", "#ABC"),
        ("url(#g)", "url(#g)"),
    ])
    def test_canonicalizes(self, run_pass, value, expected):
        root, report = run_pass(ColorOptimizer(), f'<svg><rect fill="{value}"/></svg>')
        assert root[0].get("fill") == expected
        assert report.colors_optimized == (0 if value == expected else 1)

    def test_stroke_and_stop_color(self, run_pass):
        root, report = run_pass(
            ColorOptimizer(), '<svg><stop stop-color="rgb(1,2,3)"/><path stroke="rgb(4,5,6)"/></svg>'
        )
        assert root[0].get("stop-color") == "#010203"
        assert root[1].get("stroke") == "#040506"
        assert report.colors_optimized == 2


class TestPathSimplifier:
    """Path simplification."""

    def test_rounds_and_collapses(self, run_pass):
        root, report = run_pass(
            PathSimplifier(),
            '<svg><path d="M 10.12345 20.98765 L 30 40 L 30 40 Z"/></svg>',
            coordinate_precision=2,
        )
        assert root[0].get("d") == "M 10.12 20.99 L 30 40 Z"
        assert report.paths_simplified == 1

    def test_trims_trailing_zeros(self, run_pass):
        root, _ = run_pass(PathSimplifier(), '<svg><path d="M1.500 2.000L3 4"/></svg>')
        assert root[0].get("d") == "M1.5 2L3 4"

    def test_packed_numbers_stay_separate(self, run_pass):
        root, _ = run_pass(PathSimplifier(), '<svg><path d="M10.5.25L1 1"/></svg>', coordinate_precision=1)
        assert root[0].get("d") == "M10.5 0.2L1 1"

    @pytest.mark.parametrize("d,expected", [
        ("M0 0c1.2-0.04 3 4 5 6", "M0 0c1.2 0 3 4 5 6"),
        ("M10-.04L5 5", "M10 0L5 5"),
        ("M1-1e-5L2 2", "M1 0L2 2"),
        ("M0 0c1.2-0.46 3 4 5 6", "M0 0c1.2-0.5 3 4 5 6"),
    ])
    def test_sign_separated_numbers_stay_separate(self, run_pass, d, expected):
        root, _ = run_pass(PathSimplifier(), f'<svg><path d="{d}"/></svg>', coordinate_precision=1)
        assert root[0].get("d") == expected

    def test_unchanged_path_not_counted(self, run_pass):
        _, report = run_pass(PathSimplifier(), '<svg><path d="M0 0L10 10"/></svg>')
        assert report.paths_simplified == 0


class TestTransformOptimizer:
    """Transform folding."""

    @pytest.mark.parametrize("value,expected", [
        ("translate(0,0) scale(1.0)", ""),
        ("translate(0)", ""),
        ("scale(1, 1)", ""),
        ("rotate(0)", ""),
        ("rotate(0 50 50)", ""),
        ("matrix(1 0 0 1 0 0)", ""),
        ("translate(10,0) rotate(0)", "translate(10,0)"),
        ("scale(2)", "scale(2)"),
        ("rotate(45 50 50)", "rotate(45 50 50)"),
        ("translate(0.5, 0)", "translate(0.5, 0)"),
        ("scale(10)", "scale(10)"),
    ])
    def test_fold_transform(self, value, expected):
        assert fold_transform(value) == expected

    def test_drops_empty_attribute(self, run_pass):
        root, report = run_pass(
            TransformOptimizer(),
            '<svg><g transform="translate(0,0) scale(1.0)"><rect width="1" height="1"/></g></svg>',
        )
        assert root[0].get("transform") is None
        assert report.transforms_optimized == 1

    def test_unchanged_not_counted(self, run_pass):
        _, report = run_pass(TransformOptimizer(), '<svg><g transform="scale(2)"/></svg>')
        assert report.transforms_optimized == 0


class TestCoordinateRounder:
    """Coordinate rounding."""

    def test_rounds_to_precision(self, run_pass):
        root, report = run_pass(
            CoordinateRounder(),
            '<svg><circle cx="50.123456" cy="10" r="3.14159"/></svg>',
            coordinate_precision=3,
        )
        assert root[0].get("cx") == "50.123"
        assert root[0].get("cy") == "10"
        assert root[0].get("r") == "3.142"
        assert report.coordinates_rounded == 2

    def test_tiny_deltas_are_not_counted(self, run_pass):
        root, report = run_pass(
            CoordinateRounder(), '<svg><rect x="5.00001"/></svg>', coordinate_precision=2
        )
        assert root[0].get("x") == "5.00001"
        assert report.coordinates_rounded == 0

    def test_units_survive(self):
        assert round_length("12.34567px", 3) == ("12.346px", True)
        assert round_length("50%", 1) == ("50%", False)
        assert round_length("1 2 3", 1) == ("1 2 3", False)


class TestNumbers:
    """Number formatting helpers."""

    def test_format_number(self):
        assert format_number(10.5, 3) == "10.5"
        assert format_number(3.0, 2) == "3"
        assert format_number(-0.0001, 2) == "0"

    def test_round_numbers_counts_changes(self):
        assert round_numbers("M 1.23456 2", 2) == ("M 1.23 2", 1)
        assert round_numbers("M 1.5 2", 2) == ("M 1.5 2", 0)

    def test_round_numbers_keeps_packed_literals_apart(self):
        assert round_numbers("1.0.5", 1) == ("1 0.5", 0)
        assert round_numbers("1.2-0.04", 1) == ("1.2 0", 1)


class TestIdempotence:
    """Every pass is a no-op the second time."""

    @pytest.mark.parametrize("optimization_pass", [
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
    ])
    def test_second_run_changes_nothing(self, run_pass, tiers, verbose_svg, optimization_pass):
        from svgslim.optimization.options import OptimizationOptions, resolve_options
        from svgslim.optimization.report import OptimizationReport

        root, _ = run_pass(optimization_pass, verbose_svg, aggressiveness="aggressive")
        first = serialize_svg(root)

        report = OptimizationReport()
        optimization_pass.run(root, resolve_options(OptimizationOptions(aggressiveness="aggressive"), tiers), report)
        assert serialize_svg(root) == first
        counters = report.to_dict()
        counters.pop("pass_times_ms")
        assert all(value == 0 for value in counters.values())
