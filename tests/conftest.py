"""Shared fixtures."""
import pytest

from svgslim.optimization.options import OptimizationOptions, resolve_options
from svgslim.optimization.report import OptimizationReport
from svgslim.optimizer import SVGOptimizer
from svgslim.parsing.svg_parser import parse_svg
from svgslim.utils.config import load_config

SVG_NS = 'xmlns="http://www.w3.org/2000/svg"'

SIMPLE_SVG = (
    '<svg viewBox="0 0 100 100"><!-- c -->'
    '<circle cx="50" cy="50" r="40" fill="#ff0000" opacity="1.0"/></svg>'
)

VERBOSE_SVG = f"""<?xml version="1.0" encoding="UTF-8"?>
<svg {SVG_NS} viewBox="0 0 200 200" width="200" height="200">
  <!-- Generator: hand written -->
  <defs>
    <linearGradient id="used"><stop offset="0" stop-color="rgb(0, 0, 255)"/></linearGradient>
    <linearGradient id="unused"><stop offset="0" stop-color="red"/></linearGradient>
  </defs>
  <g transform="translate(0,0)">
    <rect x="10.123456" y="10.654321" width="80" height="80" fill="url(#used)" opacity="1"/>
    <circle cx="150.0004" cy="50.5" r="30" fill="rgb(255, 0, 0)" stroke-width="1"/>
    <path d="M 10.12345 150.98765 L 60.5 190.25 L 60.5 190.25 Z" fill="rgba(0,128,0,1)"/>
  </g>
  <g></g>
</svg>
"""


@pytest.fixture
def optimizer():
    return SVGOptimizer()


@pytest.fixture
def tiers():
    return load_config()["tiers"]


@pytest.fixture
def run_pass(tiers):
    """Run one pass over `svg` and return (root, report)."""

    def _run(optimization_pass, svg, **options):
        root = parse_svg(svg)
        resolved = resolve_options(OptimizationOptions(**options), tiers)
        report = OptimizationReport()
        optimization_pass.run(root, resolved, report)
        return root, report

    return _run


@pytest.fixture
def simple_svg():
    return SIMPLE_SVG


@pytest.fixture
def verbose_svg():
    return VERBOSE_SVG
