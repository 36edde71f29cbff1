"""Basic usage examples."""
from svgslim import OptimizationOptions, Preserve, SVGOptimizer

SVG = """<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 100 100">
  <!-- exported by some editor -->
  <g transform="translate(0,0)">
    <circle cx="50.123456" cy="50.654321" r="40" fill="rgb(255, 0, 0)" opacity="1.0"/>
  </g>
</svg>
"""

optimizer = SVGOptimizer()

# --- Example 1: Default (moderate) optimization ---
result = optimizer.optimize(SVG)
print(result.optimized_svg)
print(f"{result.original_size} -> {result.optimized_size} bytes ({result.saved_percent:.1f}% saved)")

# --- Example 2: Named preset ---
result = optimizer.optimize(SVG, preset="icon")
print(result.report.to_dict())

# --- Example 3: Tier plus explicit overrides ---
options = OptimizationOptions(
    aggressiveness="aggressive",
    coordinate_precision=2,
    preserve=Preserve(comments=("exported",)),
)
result = optimizer.optimize(SVG, options)
print(result.optimized_svg)

# --- Example 4: Ask the analyzer which tier to use ---
analysis = optimizer.analyze(SVG)
result = optimizer.optimize(SVG, {"aggressiveness": analysis.recommended_aggressiveness})
print(f"Recommended: {analysis.recommended_strategy}, potential {analysis.optimization_potential}")

# --- Example 5: Check nothing visible changed ---
diff = optimizer.compare(SVG, result.optimized_svg)
print(f"Visible changes: {diff.has_visible_changes} (score {diff.difference_score})")

# --- Example 6: Failures come back as results ---
result = optimizer.optimize('<svg><circle r="1"')
print(result.error, "|", result.error_details.suggestion)
