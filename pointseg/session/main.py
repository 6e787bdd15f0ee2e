"""
Entry point for the interactive segmenter.

Preferred run:
  python -m pointseg.session.main [IMAGE ...] [--model PATH] [--threshold T]
"""
from __future__ import annotations

import argparse
import dataclasses
import logging
from typing import List, Optional

from pointseg.config.types import RunConfig
from pointseg.session.config import DEFAULT_CONFIG
from pointseg.session.run_session import run_session


def build_config(argv: Optional[List[str]] = None, base: RunConfig = DEFAULT_CONFIG) -> RunConfig:
    parser = argparse.ArgumentParser(description="Point-prompt image segmenter")
    parser.add_argument("images", nargs="*", help="Images to segment (default: config image_paths)")
    parser.add_argument("--model", help="TorchScript model path")
    parser.add_argument("--threshold", type=float, help="Mask decision threshold (score > T)")
    parser.add_argument("--all-regions", action="store_true", help="Export every mask region")
    parser.add_argument("--simplify", action="store_true", help="Drop collinear polygon points")
    args = parser.parse_args(argv)

    model = base.model
    if args.model:
        model = dataclasses.replace(model, model_path=args.model)
    if args.threshold is not None:
        model = dataclasses.replace(model, threshold=args.threshold)

    trace = base.trace
    if args.all_regions or args.simplify:
        trace = dataclasses.replace(
            trace,
            all_regions=trace.all_regions or args.all_regions,
            simplify=trace.simplify or args.simplify,
        )

    return dataclasses.replace(
        base,
        image_paths=tuple(args.images) if args.images else base.image_paths,
        model=model,
        trace=trace,
    )


def main(argv: Optional[List[str]] = None) -> None:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(name)s: %(message)s")
    run_session(build_config(argv))


if __name__ == "__main__":
    main()
