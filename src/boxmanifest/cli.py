"""boxmanifest command line interface."""

from __future__ import annotations

import logging
from pathlib import Path

import typer

from boxmanifest.errors import BoxManifestError

app = typer.Typer(help="Folder-per-class dataset to detection CSV manifest", no_args_is_help=True)
labels_app = typer.Typer(help="Label classification helpers", no_args_is_help=True)

app.add_typer(labels_app, name="labels")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _fail(exc: BoxManifestError) -> None:
    typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


@app.command("build")
def build(
    root_dir: Path | None = typer.Option(None, "--dir", "-d", help="Dataset root with one folder per label"),
    out: Path | None = typer.Option(None, "--out", "-o", help="Output CSV path"),
    labels: Path | None = typer.Option(None, "--labels", "-l", help="Label classification YAML/TOML"),
    coverage: int | None = typer.Option(None, min=0, max=100, help="Bounding box coverage percent"),
    workers: int | None = typer.Option(None, min=1, help="Parallel label directory workers"),
    skip_unreadable: bool = typer.Option(
        False,
        "--skip-unreadable",
        help="Skip images whose header cannot be read instead of failing the run",
    ),
    config: Path = typer.Option(Path("configs/default.yaml"), help="App config yaml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Scan the dataset and write the detection manifest."""
    from boxmanifest.config import load_settings
    from boxmanifest.pipeline.build_manifest import build_manifest_from_settings, print_summary

    _configure_logging(verbose)
    try:
        settings = load_settings(config)
        dataset = settings.dataset.model_copy(update={"root": str(root_dir)} if root_dir else {})
        export = settings.export.model_copy(
            update={
                k: v
                for k, v in {"output_path": str(out) if out else None, "coverage_percent": coverage}.items()
                if v is not None
            }
        )
        extraction = settings.extraction.model_copy(
            update={
                k: v
                for k, v in {"workers": workers, "skip_unreadable": skip_unreadable or None}.items()
                if v is not None
            }
        )
        label_settings = settings.labels.model_copy(update={"path": str(labels)} if labels else {})
        settings = settings.model_copy(
            update={
                "dataset": dataset,
                "export": export,
                "extraction": extraction,
                "labels": label_settings,
            }
        )
        summary = build_manifest_from_settings(settings)
    except BoxManifestError as exc:
        _fail(exc)
        return

    print_summary(summary)


def _resolve_labels_path(labels: Path | None, config: Path) -> Path:
    from boxmanifest.config import load_settings

    if labels is not None:
        return labels
    return Path(load_settings(config).labels.path)


@labels_app.command("show")
def labels_show(
    labels: Path | None = typer.Option(None, "--labels", "-l", help="Label classification YAML/TOML"),
    config: Path = typer.Option(Path("configs/default.yaml"), help="App config yaml"),
) -> None:
    """Print each class and the raw labels mapped to it."""
    from boxmanifest.labels.io import load_classification

    _configure_logging(False)
    try:
        classification = load_classification(_resolve_labels_path(labels, config))
    except BoxManifestError as exc:
        _fail(exc)
        return

    for group in classification.groups:
        suffix = f" ({group.description})" if group.description else ""
        print(f"{group.class_name}{suffix}: {', '.join(group.labels)}")


@labels_app.command("check")
def labels_check(
    labels: Path | None = typer.Option(None, "--labels", "-l", help="Label classification YAML/TOML"),
    config: Path = typer.Option(Path("configs/default.yaml"), help="App config yaml"),
) -> None:
    """Report raw labels listed in more than one group."""
    from boxmanifest.labels.io import load_classification

    _configure_logging(False)
    try:
        classification = load_classification(_resolve_labels_path(labels, config))
    except BoxManifestError as exc:
        _fail(exc)
        return

    duplicates = classification.duplicate_labels()
    if not duplicates:
        print(f"OK: {len(classification.groups)} groups, no duplicate labels")
        return
    for label, classes in duplicates.items():
        print(f"Duplicate label {label!r}: {classes} (first wins: {classes[0]})")
    raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
