#!/usr/bin/env python3
"""Quick perf benchmark for header parsing and document building."""

from __future__ import annotations

import argparse
import cProfile
import io
import logging
from pathlib import Path
import pstats
import statistics
import time

from tqdm import tqdm

from unrealdocpy.diagnostics import HeaderParseError
from unrealdocpy.pipeline import parse_header_file


def _collect_headers(root: Path) -> list[Path]:
    files = sorted([*root.rglob("*.h"), *root.rglob("*.hpp")])
    return [path for path in files if path.is_file()]


def _run_once(
    files: list[Path],
    *,
    label: str,
    show_progress: bool,
) -> tuple[float, int, int, int]:
    start = time.perf_counter()
    total_entities = 0
    total_diagnostics = 0
    failures = 0
    iterator = (
        tqdm(files, desc=label, unit="file")
        if show_progress
        else files
    )
    for path in iterator:
        try:
            result = parse_header_file(path)
        except HeaderParseError:
            failures += 1
            continue
        document = result.document
        total_entities += (
            len(document.enums)
            + len(document.structs)
            + len(document.classes)
            + len(document.functions)
            + len(document.delegates)
        )
        total_diagnostics += len(result.diagnostics)
    duration = time.perf_counter() - start
    return duration, total_entities, total_diagnostics, failures


def main() -> int:
    parser = argparse.ArgumentParser(description="Benchmark header parsing throughput")
    parser.add_argument("root", type=Path, help="Directory searched recursively for headers")
    parser.add_argument("--runs", type=int, default=5, help="Measured runs")
    parser.add_argument("--warmups", type=int, default=1, help="Warmup runs")
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable tqdm progress bars (useful for pure timing)",
    )
    parser.add_argument(
        "--profile",
        action="store_true",
        help="Run cProfile and print top hotspots",
    )
    parser.add_argument(
        "--profile-top",
        type=int,
        default=30,
        help="Number of cProfile rows to print (default: 30)",
    )
    parser.add_argument(
        "--profile-sort",
        type=str,
        default="tottime",
        help="cProfile sort key (default: tottime, common: cumulative)",
    )
    parser.add_argument(
        "--limit-files",
        type=int,
        default=0,
        help="Optional file limit for quick profiling/smoke tests (0 = all files)",
    )
    args = parser.parse_args()

    # Overwrite warnings would drown the progress bars.
    logging.basicConfig(level=logging.ERROR, format="[%(levelname)s] %(message)s")

    root: Path = args.root
    if not root.exists() or not root.is_dir():
        raise SystemExit(f"Invalid root: {root}")

    files = _collect_headers(root)
    if not files:
        raise SystemExit(f"No .h/.hpp files found under {root}")
    if args.limit_files > 0:
        files = files[: args.limit_files]

    show_progress = not args.no_progress

    def _benchmark() -> tuple[list[float], int, int, int]:
        for warmup_idx in range(max(args.warmups, 0)):
            _run_once(
                files,
                label=f"warmup {warmup_idx + 1}/{max(args.warmups, 0)}",
                show_progress=show_progress,
            )

        timings: list[float] = []
        entities_count = 0
        diagnostics_count = 0
        failures_count = 0
        for run_idx in range(max(args.runs, 1)):
            duration, entities_count, diagnostics_count, failures_count = _run_once(
                files,
                label=f"run {run_idx + 1}/{max(args.runs, 1)}",
                show_progress=show_progress,
            )
            timings.append(duration)
        return timings, entities_count, diagnostics_count, failures_count

    if args.profile:
        profiler = cProfile.Profile()
        profiler.enable()
        timings, entities_count, diagnostics_count, failures_count = _benchmark()
        profiler.disable()
        stream = io.StringIO()
        stats = pstats.Stats(profiler, stream=stream)
        stats.sort_stats(args.profile_sort).print_stats(max(args.profile_top, 1))
        print("\n[cProfile top functions]")
        print(stream.getvalue())
    else:
        timings, entities_count, diagnostics_count, failures_count = _benchmark()

    mean = statistics.mean(timings)

    print(f"Dataset: {root}")
    print(f"Files: {len(files)}")
    print(f"Entities: {entities_count}")
    print(f"Diagnostics: {diagnostics_count}")
    print(f"Failed files: {failures_count}")
    print(f"Runs: {len(timings)} (warmups={max(args.warmups, 0)})")
    print(f"Best:   {min(timings):.4f}s")
    print(f"Median: {statistics.median(timings):.4f}s")
    print(f"Mean:   {mean:.4f}s")
    print(f"Worst:  {max(timings):.4f}s")
    print(f"Files/s (mean): {len(files) / mean:.1f}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
