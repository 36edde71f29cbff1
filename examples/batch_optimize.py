"""Batch optimization example."""
import threading
from pathlib import Path

from svgslim import SVGOptimizer

INPUT_DIR = Path("examples/batch_inputs")
OUTPUT_DIR = Path("examples/batch_outputs")

OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

optimizer = SVGOptimizer()
cancel = threading.Event()

paths = sorted(INPUT_DIR.glob("*.svg"))
documents = [p.read_text(encoding="utf-8") for p in paths]


def on_progress(progress):
    print(
        f"{progress.completed_files}/{progress.total_files} {progress.current_file} "
        f"saved {progress.total_size_reduction} bytes so far"
    )


results = optimizer.process_batch(
    documents,
    preset="web",
    on_progress=on_progress,
    cancel_event=cancel,
    names=[p.name for p in paths],
)

for path, result in zip(paths, results):
    if not result.success:
        print(f"Failed: {path.name}: {result.error}")
        continue
    output_path = OUTPUT_DIR / path.name
    output_path.write_text(result.optimized_svg, encoding="utf-8")
    print(f"Saved: {output_path}")
