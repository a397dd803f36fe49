"""CLI entry point for xyzview.

Usage:
    xyzview run                              # Run full pipeline
    xyzview run-step boundary_detection -i '{"points_path": "..."}'
    xyzview info                             # Show pipeline info
    xyzview boundary cloud.xyz [marked.xyz]  # Boundary statistics / marked export
    xyzview reduce cloud.xyz out.xyz --method gradient --percentage 25
    xyzview invert cloud.xyz out.xyz
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from xyzview.core.logging import setup_logging

app = typer.Typer(name="xyzview", help="Point cloud boundary detection and density reduction")
console = Console()

DEFAULT_CONFIG = Path("configs/pipeline.yaml")


def _load_or_exit(path: Path) -> list:
    from xyzview.utils.io import read_xyz

    if not path.exists():
        console.print(f"[red]Input file '{path}' not found[/red]")
        raise typer.Exit(1)
    points = read_xyz(path)
    if not points:
        console.print(f"[red]No points found in {path}[/red]")
        raise typer.Exit(1)
    return points


@app.command()
def run(config: Path = typer.Option(DEFAULT_CONFIG, help="Pipeline config path")) -> None:
    """Run the full pipeline."""
    setup_logging()
    from xyzview.core.pipeline_runner import run_pipeline

    results = run_pipeline(config)
    for name, output in results.items():
        console.print(f"[green]{name}[/green]: {output.model_dump_json()}")


@app.command()
def run_step(
    step_name: str = typer.Argument(..., help="Step name (e.g. boundary_detection)"),
    config: Path = typer.Option(DEFAULT_CONFIG, help="Pipeline config path"),
    input_json: str = typer.Option(None, "--input", "-i", help="Input as JSON string"),
) -> None:
    """Run a single pipeline step."""
    import json

    setup_logging()
    from xyzview.core.pipeline_runner import load_pipeline_config, import_step_class, load_step_config

    pipeline_cfg = load_pipeline_config(config)
    entry = next((s for s in pipeline_cfg.steps if s.name == step_name), None)
    if entry is None:
        console.print(f"[red]Step '{step_name}' not found in pipeline config[/red]")
        raise typer.Exit(1)

    step_cls = import_step_class(entry.module)
    step_config = load_step_config(Path(entry.config_file), step_cls.config_type)
    step_instance = step_cls(config=step_config, data_root=pipeline_cfg.data_root)

    input_data = dict(entry.inputs)
    if input_json:
        input_data.update(json.loads(input_json))
    else:
        schema = step_cls.input_type.model_json_schema()
        missing = [f for f in schema.get("required", []) if f not in input_data]
        if missing:
            console.print(f"[yellow]Step '{step_name}' requires input fields: {missing}[/yellow]")
            console.print("[yellow]Use --input/-i with JSON string, e.g.:[/yellow]")
            console.print(f'  xyzview run-step {step_name} -i \'{{"field": "value"}}\'')
            raise typer.Exit(1)

    console.print(f"[green]Running step: {step_name}[/green]")
    step_input = step_cls.input_type(**input_data)
    output = step_instance.execute(step_input)
    console.print(f"[green]Done. Output:[/green] {output.model_dump_json(indent=2)}")


@app.command()
def info(config: Path = typer.Option(DEFAULT_CONFIG, help="Pipeline config path")) -> None:
    """Show pipeline steps and their status."""
    from xyzview.core.pipeline_runner import load_pipeline_config

    pipeline_cfg = load_pipeline_config(config)
    table = Table(title=f"Pipeline: {pipeline_cfg.project_name}")
    table.add_column("#", style="dim")
    table.add_column("Step", style="cyan")
    table.add_column("Module", style="green")
    table.add_column("Enabled", style="yellow")
    table.add_column("Depends On", style="dim")

    for i, step in enumerate(pipeline_cfg.steps, 1):
        table.add_row(
            str(i),
            step.name,
            step.module,
            "Y" if step.enabled else "N",
            ", ".join(step.depends_on) if step.depends_on else "-",
        )
    console.print(table)


@app.command()
def boundary(
    input_path: Path = typer.Argument(..., help="Input XYZ point cloud file"),
    output_path: Path = typer.Argument(None, help="Write all points, boundary in red, interior in white"),
    mode: str = typer.Option("horizontal", help="'horizontal' (2D) or 'volumetric' (3D)"),
    include_stacked: bool = typer.Option(False, help="Also mark points stacked on a hull vertex"),
    decimals: int = typer.Option(6, help="Decimal places of the marked export"),
) -> None:
    """Identify boundary (convex hull) points of a cloud."""
    from xyzview.utils.geometry import BOUNDARY_MODES, identify_boundary_points
    from xyzview.utils.io import marked_boundary_points, write_xyz

    setup_logging("WARNING")
    if mode not in BOUNDARY_MODES:
        console.print(f"[red]Unknown mode '{mode}', expected one of {BOUNDARY_MODES}[/red]")
        raise typer.Exit(1)

    points = _load_or_exit(input_path)
    indices = identify_boundary_points(points, mode, include_stacked=include_stacked)
    n = len(points)

    table = Table(title=f"Boundary points ({mode})")
    table.add_column("", style="cyan")
    table.add_column("Count", justify="right")
    table.add_column("%", justify="right", style="dim")
    table.add_row("Total", str(n), "100.0")
    table.add_row("Boundary", str(len(indices)), f"{len(indices) / n * 100:.1f}")
    table.add_row("Interior", str(n - len(indices)), f"{(n - len(indices)) / n * 100:.1f}")
    console.print(table)

    console.print("Sample boundary points (first 5):")
    for i, idx in enumerate(sorted(indices)[:5], 1):
        p = points[idx]
        console.print(f"  {i}. x={p.x:.2f}, y={p.y:.2f}, z={p.z:.2f}")

    if output_path is not None:
        write_xyz(
            output_path,
            marked_boundary_points(points, indices),
            decimals,
            header="Boundary points marked in RED, interior points in WHITE",
        )
        console.print(f"[green]Exported {n} points to {output_path}[/green]")


@app.command()
def reduce(
    input_path: Path = typer.Argument(..., help="Input XYZ point cloud file"),
    output_path: Path = typer.Argument(..., help="Output XYZ file"),
    method: str = typer.Option("voxel", help="'voxel' or 'gradient' (alias 'zgradient')"),
    percentage: float = typer.Option(50.0, help="Percentage of points to retain, in (0, 100]"),
    preserve_boundary: bool = typer.Option(True, help="Never drop boundary points"),
    mode: str = typer.Option("horizontal", help="Boundary mode: 'horizontal' or 'volumetric'"),
    seed: int = typer.Option(None, help="Random seed for gradient sampling"),
    decimals: int = typer.Option(6, help="Decimal places of the output"),
) -> None:
    """Reduce point density, optionally keeping boundary points."""
    import numpy as np

    from xyzview.utils.geometry import identify_boundary_points
    from xyzview.utils.io import write_xyz
    from xyzview.utils.reduction import ACCEPTED_METHODS, reduce_point_cloud

    setup_logging("WARNING")
    if method not in ACCEPTED_METHODS:
        console.print(f"[red]Unknown method '{method}', expected one of {ACCEPTED_METHODS}[/red]")
        raise typer.Exit(1)
    if not 0 < percentage <= 100:
        console.print(f"[red]Percentage must be in (0, 100], got {percentage}[/red]")
        raise typer.Exit(1)

    points = _load_or_exit(input_path)
    try:
        indices = identify_boundary_points(points, mode) if preserve_boundary else set()
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    reduced = reduce_point_cloud(
        points, method, percentage, indices, rng=np.random.default_rng(seed)
    )
    write_xyz(output_path, reduced, decimals)
    console.print(
        f"[green]{method}: {len(points)} -> {len(reduced)} points "
        f"({len(indices)} boundary kept) -> {output_path}[/green]"
    )


@app.command()
def invert(
    input_path: Path = typer.Argument(..., help="Input XYZ point cloud file"),
    output_path: Path = typer.Argument(..., help="Output XYZ file"),
    decimals: int = typer.Option(6, help="Decimal places of the output"),
) -> None:
    """Negate the elevation (z) of every point."""
    from xyzview.utils.geometry import invert_elevation
    from xyzview.utils.io import write_xyz

    setup_logging("WARNING")
    points = _load_or_exit(input_path)
    write_xyz(output_path, invert_elevation(points), decimals)
    console.print(f"[green]Inverted {len(points)} points -> {output_path}[/green]")


if __name__ == "__main__":
    app()
