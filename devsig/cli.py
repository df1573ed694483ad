"""
devsig command-line interface.

Usage::

    devsig detect
    devsig detect --json
    devsig classify --screen 1179x2556 --dpr 3 --gpu "Apple A17 Pro GPU"
    devsig classify --category mobile --os iOS --browser Safari
    devsig annotate visitors.csv -o visitors_annotated.csv
    devsig catalog
"""

from __future__ import annotations

import json as json_mod
import logging

import click

from devsig import __version__

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    from devsig.config import get_settings

    level = "DEBUG" if verbose else get_settings().log_level
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_catalog():
    from devsig.inference import CatalogError, load_default_catalog

    try:
        return load_default_catalog()
    except CatalogError as exc:
        raise click.ClickException(str(exc)) from exc


def _parse_screen(
    ctx: click.Context, param: click.Parameter, value: str | None
) -> tuple[int, int] | None:
    if value is None:
        return None
    width, sep, height = value.lower().partition("x")
    try:
        if not sep:
            raise ValueError
        return int(width), int(height)
    except ValueError:
        raise click.BadParameter("expected WIDTHxHEIGHT, e.g. 1179x2556") from None


def _print_result(result, as_json: bool) -> None:
    if as_json:
        click.echo(json_mod.dumps(result.to_dict(), indent=2))
        return

    color = "yellow" if result.is_unknown else "green"
    click.secho(f"\n  Detected model: {result.detected_model}", bold=True, fg=color)
    click.echo(f"  Confidence: {result.confidence}")
    click.echo()
    click.secho("  Top matches", bold=True)
    for match in result.top_matches:
        click.echo(f"    {match.score:>3}  {match.model_name}")
    click.echo()


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="devsig")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(verbose: bool) -> None:
    """devsig — infer device models from display, GPU and analytics signals."""
    _configure_logging(verbose)


# ---------------------------------------------------------------------------
# devsig detect
# ---------------------------------------------------------------------------


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option("--force", is_flag=True, help="Ignore the cached sample.")
def detect(as_json: bool, force: bool) -> None:
    """Sample this machine and classify it against the catalog."""
    from devsig.inference import detection_report

    report = detection_report(force=force, catalog=_load_catalog())

    if as_json:
        click.echo(json_mod.dumps(report.to_dict(), indent=2))
        return

    click.secho("\n  Local characteristics\n", bold=True)
    for key, value in report.characteristics.to_dict().items():
        click.echo(f"    {key}: {value}")
    _print_result(report.detection, as_json=False)

    if report.diagnostics:
        click.secho("  Diagnostics", bold=True, fg="yellow")
        for d in report.diagnostics:
            click.echo(f"    • {d}")


# ---------------------------------------------------------------------------
# devsig classify
# ---------------------------------------------------------------------------


@main.command()
@click.option("--screen", callback=_parse_screen, help="Screen size in device pixels, WxH.")
@click.option("--dpr", type=float, default=None, help="Device pixel ratio.")
@click.option("--gpu", default=None, help="GPU renderer string.")
@click.option("--touch", type=click.IntRange(min=0), default=None, help="Max touch points.")
@click.option("--category", default=None, help="Device category (mobile, desktop, tablet).")
@click.option("--os", "operating_system", default=None, help="Operating system name.")
@click.option("--browser", default=None, help="Browser name.")
@click.option("--brand", default=None, help="Vendor-reported device brand.")
@click.option("--model", default=None, help="Vendor-reported device model.")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
def classify(
    screen: tuple[int, int] | None,
    dpr: float | None,
    gpu: str | None,
    touch: int | None,
    category: str | None,
    operating_system: str | None,
    browser: str | None,
    brand: str | None,
    model: str | None,
    as_json: bool,
) -> None:
    """Classify one set of observed characteristics."""
    from devsig.inference import ObservedCharacteristics
    from devsig.inference import classify as run_classify

    observed = ObservedCharacteristics.from_mapping(
        {
            "screen_width": screen[0] if screen else None,
            "screen_height": screen[1] if screen else None,
            "pixel_ratio": dpr,
            "gpu_renderer": gpu,
            "max_touch_points": touch,
            "device_category": category.lower() if category else None,
            "operating_system": operating_system,
            "browser": browser,
            "device_brand": brand,
            "device_model": model,
        }
    )
    _print_result(run_classify(observed, _load_catalog()), as_json)


# ---------------------------------------------------------------------------
# devsig annotate
# ---------------------------------------------------------------------------


@main.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output",
    "-o",
    "output_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Output file (default: <input>_annotated.<ext>).",
)
def annotate(input_path: str, output_path: str | None) -> None:
    """Annotate analytics rows (CSV, JSON or Parquet) with device models."""
    from pathlib import Path

    from devsig.inference import UNKNOWN_MODEL
    from devsig.records import annotate_frame, read_records, write_records

    catalog = _load_catalog()
    source = Path(input_path)
    target = (
        Path(output_path)
        if output_path
        else source.with_name(f"{source.stem}_annotated{source.suffix}")
    )
    try:
        frame = read_records(source)
        annotated = annotate_frame(frame, catalog)
        write_records(annotated, target)
    except (ValueError, OSError) as exc:
        raise click.ClickException(str(exc)) from exc

    identified = int((annotated["detected_model"] != UNKNOWN_MODEL).sum())
    click.echo(f"Annotated {len(annotated)} rows ({identified} identified) -> {target}")


# ---------------------------------------------------------------------------
# devsig catalog
# ---------------------------------------------------------------------------


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
def catalog(as_json: bool) -> None:
    """List the device signatures in the active catalog."""
    active = _load_catalog()

    if as_json:
        click.echo(json_mod.dumps([s.to_dict() for s in active], indent=2))
        return

    click.secho(f"\n  Device catalog ({len(active)} signatures)\n", bold=True)
    for s in active:
        screen = f"{s.expected_screen.width}x{s.expected_screen.height}"
        hints = ", ".join(s.gpu_hints) or "-"
        touch = s.expected_touch_points if s.expected_touch_points is not None else "-"
        click.echo(
            f"    {s.model_name:<22} {screen:>10} @{s.expected_pixel_ratio:<5g} "
            f"touch={touch}  gpu: {hints}"
        )
    click.echo()


if __name__ == "__main__":
    main()
