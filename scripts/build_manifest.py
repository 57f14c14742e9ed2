# CLI wrapper for building a detection CSV manifest from a folder-per-class dataset.

import argparse
import logging
import sys

from boxmanifest.config import load_settings
from boxmanifest.errors import BoxManifestError
from boxmanifest.pipeline.build_manifest import build_manifest_from_settings, print_summary


def main() -> None:
    p = argparse.ArgumentParser()

    # Root folder with one subfolder per raw label.
    p.add_argument("--dir", default=None, help="Dataset root (default from config: images)")

    # Output CSV.
    p.add_argument("--out", default=None, help="Output CSV path (default from config: tensorflow.csv)")

    # Label grouping table.
    p.add_argument("--labels", default=None, help="Label classification YAML/TOML")

    # Box size as a percentage of each image side.
    p.add_argument("--coverage", type=int, default=None, help="Bounding box coverage percent (0-100)")

    # Parallel label directory workers (default: CPU count).
    p.add_argument("--workers", type=int, default=None, help="Number of label directory workers")

    p.add_argument("--skip-unreadable", action="store_true", help="Skip undecodable images instead of failing")
    p.add_argument("--config", default="configs/default.yaml", help="App config yaml")

    args = p.parse_args()
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    try:
        settings = load_settings(args.config)
    except BoxManifestError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if args.dir:
        settings.dataset.root = args.dir
    if args.out:
        settings.export.output_path = args.out
    if args.labels:
        settings.labels.path = args.labels
    if args.coverage is not None:
        settings.export.coverage_percent = args.coverage
    if args.workers is not None:
        if args.workers < 1:
            p.error("--workers must be >= 1")
        settings.extraction.workers = args.workers
    if args.skip_unreadable:
        settings.extraction.skip_unreadable = True

    try:
        summary = build_manifest_from_settings(settings)
    except BoxManifestError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
    print_summary(summary)


if __name__ == "__main__":
    main()
