"""
Performance demonstration for preview vs. final photo rendering.

Times the interactive preview render against the final export render for a
few source sizes and edit settings, then shows how many renders the
coalescing scheduler actually runs for a burst of slider changes.
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import time

from ICS_Libs.ImageEditingLib import (
    CoalescingPreviewScheduler,
    CropRegion,
    EditParameters,
    PreviewRenderer,
    RasterBuffer,
)


def benchmark_render(size, params, iterations=3):
    """Benchmark preview and final renders of a size x size source."""
    print(f"\nBenchmarking {size}x{size} source with {params}")
    print("-" * 60)

    source = RasterBuffer.solid(size, size, (200, 100, 50, 255))
    region = CropRegion.centered_square(size, size)
    renderer = PreviewRenderer(export_scale=2.0)

    timings = {}
    for label, render in (("preview", renderer.render_preview), ("final", renderer.render_final)):
        times = []
        for i in range(iterations):
            start = time.time()
            result = render(source, region, params)
            elapsed = time.time() - start
            times.append(elapsed)
            suffix = " (warmup)" if i == 0 else ""
            print(f"  {label} run {i+1}: {elapsed:.3f}s -> {result.width}x{result.height}{suffix}")

        timings[label] = sum(times[1:]) / len(times[1:])
        print(f"  {label} average (excluding warmup): {timings[label]:.3f}s")

    if timings["preview"] > 0:
        print(f"\n✓ Preview is {timings['final'] / timings['preview']:.1f}x faster than final")
    return timings["preview"], timings["final"]


def demo_coalescing(size=1000, steps=50):
    """Simulate dragging a slider through `steps` values."""
    print("\n" + "=" * 60)
    print(f"Coalescing {steps} brightness changes on a {size}x{size} source")
    print("=" * 60)

    source = RasterBuffer.solid(size, size, (120, 120, 120, 255))
    region = CropRegion.centered_square(size, size)
    delivered = []
    scheduler = CoalescingPreviewScheduler(source, delivered.append)

    start = time.time()
    try:
        for step in range(steps):
            scheduler.submit(region, EditParameters(brightness_pct=50 + step, sharpen_pct=30))
        scheduler.wait()
    finally:
        scheduler.shutdown()
    elapsed = time.time() - start

    print(f"  Requests submitted: {steps}")
    print(f"  Renders executed:   {scheduler.rendered_count}")
    print(f"  Previews delivered: {len(delivered)}")
    print(f"  Total time:         {elapsed:.3f}s")


def main():
    """Run render benchmarks."""
    print("=" * 60)
    print("Photo Render Performance Demonstration")
    print("=" * 60)

    test_cases = [
        (400, EditParameters()),
        (1000, EditParameters(rotation_degrees=15, zoom=1.2)),
        (1000, EditParameters(brightness_pct=120, sharpen_pct=50, vignette_pct=40)),
        (2000, EditParameters(rotation_degrees=7, sharpen_pct=50, vignette_pct=40)),
    ]

    results = []
    for size, params in test_cases:
        try:
            preview_time, final_time = benchmark_render(size, params)
            results.append((size, params, preview_time, final_time))
        except KeyboardInterrupt:
            print("\n\nBenchmark interrupted by user")
            break
        except Exception as e:
            print(f"\n⚠ Error: {e}")
            continue

    print("\n" + "=" * 60)
    print("Summary")
    print("=" * 60)
    print(f"{'Size':<8} {'Preview':<12} {'Final':<12}")
    print("-" * 60)
    for size, _, preview_time, final_time in results:
        print(f"{size:<8} {preview_time:<12.3f} {final_time:<12.3f}")

    demo_coalescing()


if __name__ == "__main__":
    main()
