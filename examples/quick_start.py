#!/usr/bin/env python3
"""
Quick Start Guide for DStretch Studio

This script shows the common workflows for enhancing faint rock-art
pictographs: decorrelation stretch, tonal touch-up, relief enhancement
and interactive use through the background worker.

Usage:
    python examples/quick_start.py [photo.jpg]

Without an argument a synthetic rock panel is generated.
"""

import sys
from pathlib import Path

import numpy as np

# Add project to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


def synthetic_panel() -> np.ndarray:
    """Sandstone-coloured noise with a faint ochre handprint."""
    rng = np.random.default_rng(0)
    height, width = 240, 320
    rgb = np.empty((height, width, 3))
    rgb[..., 0], rgb[..., 1], rgb[..., 2] = 150.0, 120.0, 95.0
    rgb += rng.normal(0.0, 7.0, size=rgb.shape)

    yy, xx = np.mgrid[0:height, 0:width]
    palm = ((yy - 140) / 40.0) ** 2 + ((xx - 160) / 32.0) ** 2 < 1
    fingers = np.zeros_like(palm)
    for cx in (125, 145, 165, 185):
        fingers |= (abs(xx - cx) < 6) & (yy > 55) & (yy < 110)
    figure = palm | fingers
    rgb[figure, 0] += 6.0
    rgb[figure, 1] -= 2.0

    buf = np.empty((height, width, 4), dtype=np.uint8)
    buf[..., :3] = np.clip(np.rint(rgb), 0, 255).astype(np.uint8)
    buf[..., 3] = 255
    return buf


def main():
    print("=" * 60)
    print("  DStretch Studio - Quick Start Guide")
    print("=" * 60)

    from dstretch_studio import EnhancementPipeline, ParameterSet, PipelineWorker
    from dstretch_studio.imaging import default_export_name, load_pixel_buffer, save_pixel_buffer

    if len(sys.argv) > 1:
        pixels = load_pixel_buffer(sys.argv[1], max_size=(1024, 1024))
        print(f"\nLoaded {sys.argv[1]}")
    else:
        pixels = synthetic_panel()
        print("\nUsing a synthetic 320x240 rock panel")

    pipeline = EnhancementPipeline()
    output_dir = Path("dstretch_output")
    output_dir.mkdir(exist_ok=True)

    # =========================================================================
    # Example 1: Decorrelation stretch in different colorspaces
    # =========================================================================
    print("\n1. DECORRELATION STRETCH")
    print("-" * 40)

    for space in ("RGB", "LAB", "YRE", "YBK", "CRGB"):
        params = ParameterSet(dstretch_enabled=True, colorspace=space, stretch_amount=0.6)
        result = pipeline.process(pixels, params)
        path = save_pixel_buffer(result.buffer, output_dir / f"stretch_{space.lower()}.png")
        print(f"    {space:5s} -> {path}  ({result.duration_seconds * 1000:.0f} ms)")

    # =========================================================================
    # Example 2: Stretch plus tonal adjustments
    # =========================================================================
    print("\n2. TONAL ADJUSTMENTS")
    print("-" * 40)

    params = ParameterSet(
        dstretch_enabled=True,
        colorspace="LAB",
        stretch_amount=0.5,
        black_point=5,
        contrast=15,
        saturation=20,
        sharpness=30,
    )
    result = pipeline.process(pixels, params)
    save_pixel_buffer(result.buffer, output_dir / "lab_tonal.png")
    print(f"""
    Stages: {', '.join(stage.value for stage in result.stages)}
    Notes:  {'; '.join(result.processing_notes)}
    """)

    # =========================================================================
    # Example 3: Relief enhancement for pecked engravings
    # =========================================================================
    print("\n3. RELIEF ENHANCEMENT")
    print("-" * 40)

    params = ParameterSet(
        normal_map_strength=60,
        light_angle=135,
        light_intensity=70,
        edge_strength=8,
        edge_thickness=2,
        directional_sharpen=40,
    )
    result = pipeline.process(pixels, params)
    save_pixel_buffer(result.buffer, output_dir / "relief.png")
    print(f"    {result.get_info()}")

    # =========================================================================
    # Example 4: Interactive use with the background worker
    # =========================================================================
    print("\n4. BACKGROUND WORKER")
    print("-" * 40)

    with PipelineWorker(pipeline) as worker:
        futures = [
            worker.submit(pixels, ParameterSet(dstretch_enabled=True, stretch_amount=amount))
            for amount in (0.2, 0.4, 0.6, 0.8)
        ]
        final = futures[-1].result()

    skipped = sum(f.cancelled() for f in futures)
    name = default_export_name()
    save_pixel_buffer(final.buffer, output_dir / name)
    print(f"""
    Submitted 4 slider positions, {skipped} superseded before running.
    Latest result saved as {output_dir / name}
    """)

    print("=" * 60)
    print(f"  Outputs written to {output_dir.resolve()}")
    print("=" * 60)


if __name__ == "__main__":
    main()
