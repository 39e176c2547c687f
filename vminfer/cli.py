# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
vminfer Command Line Interface

    vminfer run --preset cifar10 --input images/cat.bin --time
    vminfer run --config model.json --weights-dir weights/
    vminfer presets
"""

from __future__ import annotations

import argparse
import json
import sys
import warnings

from .errors import SizeMismatchWarning, VMInferError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vminfer",
        description="vminfer - classify inputs with compiled Relax VM modules",
    )

    parser.add_argument(
        "--version",
        "-v",
        action="store_true",
        help="Show version information",
    )

    parser.add_argument(
        "--info",
        action="store_true",
        help="Show system information",
    )

    parser.add_argument(
        "--verbosity",
        type=int,
        choices=range(0, 5),
        default=None,
        help="Log verbosity 0-4 (default: $VMINFER_VERBOSITY or 2)",
    )

    parser.add_argument(
        "--log-json",
        action="store_true",
        help="Write log records as JSON lines",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Run command
    run_parser = subparsers.add_parser(
        "run",
        help="Run one forward pass and print the predicted label",
    )
    source = run_parser.add_mutually_exclusive_group()
    source.add_argument(
        "--preset",
        default=None,
        help="Built-in model description (default: fashion-mnist-mlp)",
    )
    source.add_argument(
        "--config",
        default=None,
        help="JSON model description",
    )
    run_parser.add_argument("--model", default=None, help="Compiled artifact path")
    run_parser.add_argument("--input", default=None, help="Input tensor file")
    run_parser.add_argument(
        "--weights-dir",
        default=None,
        help="Directory relative tensor files are read from",
    )
    run_parser.add_argument("--device", default=None, help="Device, e.g. cpu:0")
    run_parser.add_argument(
        "--allocator",
        choices=["pooled", "naive"],
        default=None,
        help="Allocator for the device and host arenas",
    )
    run_parser.add_argument("--entry", default=None, help="Entry function name")
    run_parser.add_argument("--backend", default=None, help="Runtime backend")
    run_parser.add_argument(
        "--time",
        action="store_true",
        help="Report the entry function call time in microseconds",
    )
    run_parser.add_argument(
        "--repeat",
        type=int,
        default=1,
        help="Number of forward passes (default: 1)",
    )
    run_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON",
    )

    # Presets command
    subparsers.add_parser(
        "presets",
        help="List built-in model descriptions",
    )

    return parser


def main(argv=None):
    """Main entry point for vminfer CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    from .observability import setup_logging

    setup_logging(args.verbosity, json_format=args.log_json)

    if args.version:
        from . import __version__

        print(f"vminfer v{__version__}")
        return 0

    if args.info:
        _show_info()
        return 0

    try:
        if args.command == "run":
            return _run(args)

        if args.command == "presets":
            return _list_presets()
    except VMInferError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # Default: show help
    parser.print_help()
    return 0


def _resolve_config(args):
    from .config import get_preset, load_config

    if args.config:
        config = load_config(args.config)
    else:
        config = get_preset(args.preset or "fashion-mnist-mlp")

    changes = {}
    if args.model:
        changes["artifact"] = args.model
    if args.weights_dir:
        changes["data_dir"] = args.weights_dir
    if args.device:
        changes["device"] = args.device
    if args.allocator:
        changes["allocator"] = args.allocator
        changes["host_allocator"] = args.allocator
    if args.entry:
        changes["entry"] = args.entry
    if args.backend:
        changes["backend"] = args.backend
    if changes:
        config = config.replace(**changes)
    if args.input:
        config = config.with_input(args.input)
    return config


def _run(args):
    """Run the pipeline and print its report."""
    from .inference import InferencePipeline

    if args.repeat < 1:
        print("Error: --repeat must be at least 1", file=sys.stderr)
        return 2

    config = _resolve_config(args)

    with warnings.catch_warnings():
        # size mismatches are already reported through the vminfer.io logger
        warnings.simplefilter("ignore", SizeMismatchWarning)
        pipeline = InferencePipeline.from_config(config)
        buffers = pipeline.load_buffers()
        for _ in range(args.repeat):
            report = pipeline.run(buffers)

    if args.json:
        data = report.to_dict()
        if args.repeat > 1:
            data["latency"] = pipeline.metrics.get_summary()
        print(json.dumps(data, indent=2))
        return 0

    print(report.module)
    if args.time:
        print(f"Time taken by function: {report.latency_us:.0f} microseconds")
    if args.repeat > 1:
        summary = pipeline.metrics.get_summary()
        print(
            f"Runs: {summary['total_inferences']}  "
            f"mean: {summary['latency_mean_us']:.0f}us  "
            f"p50: {summary['latency_p50_us']:.0f}us  "
            f"p99: {summary['latency_p99_us']:.0f}us"
        )

    result = report.classification
    print("Output C:")
    print(" ".join(f"{v:g}" for v in result.scores))
    print(f"Max value: {result.value:g} at index: {result.index}")
    print(f"Predicted label: {result.label}")
    return 0


def _list_presets():
    from .config import PRESETS

    for name, config in sorted(PRESETS.items()):
        shapes = ", ".join(f"{a.name}{list(a.shape)}" for a in config.arguments)
        print(f"{name}: {config.artifact} ({shapes}) -> {len(config.labels)} classes")
    return 0


def _show_info():
    """Show system and vminfer information."""
    import platform

    import numpy as np

    from . import __version__
    from .backends import create_backend, list_backends

    print("=" * 50)
    print("vminfer System Information")
    print("=" * 50)

    print(f"vminfer Version: {__version__}")
    print(f"Python Version: {platform.python_version()}")
    print(f"Platform: {platform.platform()}")
    print(f"NumPy Version: {np.__version__}")

    for name in list_backends():
        backend = create_backend(name)
        print(f"Backend {name}: {backend.version()}")

    print("=" * 50)


if __name__ == "__main__":
    sys.exit(main())
