"""SOC 2 Roadmap (soc2r) - readiness roadmap from an intake questionnaire.

Commands read and write the project's .soc2-roadmap/ directory. The engine
itself is pure; everything printed here comes from this module.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..core.config import get_effective_config, initialize_project, state_dir
from ..core.storage import CompletedTaskStore, FileIntakeRepository, FileRoadmapRepository, roadmap_to_dict
from ..models.roadmap import ComplianceRoadmap
from ..utils.sanitize import sanitize_error, sanitize_key

console = Console()
err_console = Console(stderr=True)

EXIT_INVALID_INTAKE = 11
EXIT_NOT_FOUND = 12
EXIT_UNKNOWN_TASK = 13


def _load_config(ctx: click.Context, project_path: Path, cli_overrides: Optional[dict] = None) -> dict:
    if not state_dir(project_path).exists():
        err_console.print("  [red]ERROR[/red] Project not initialized. Run: soc2r init -p <path>")
        ctx.exit(EXIT_NOT_FOUND)
    return get_effective_config(project_path, cli_overrides)


def _repository(config: dict) -> FileRoadmapRepository:
    return FileRoadmapRepository(Path(config["_project_path"]), config["storage"]["roadmaps_dir"])


def _task_store(config: dict) -> CompletedTaskStore:
    return CompletedTaskStore(Path(config["_project_path"]), config["storage"]["completed_tasks_file"])


def _intakes(config: dict) -> FileIntakeRepository:
    return FileIntakeRepository(Path(config["_project_path"]), config["storage"]["intakes_dir"])


def _load_roadmap(ctx: click.Context, config: dict, key: str) -> ComplianceRoadmap:
    roadmap = _repository(config).load(key)
    if roadmap is None:
        err_console.print(f"  [red]ERROR[/red] No roadmap stored for key '{sanitize_key(key)}'. Run: soc2r generate")
        ctx.exit(EXIT_NOT_FOUND)
    return roadmap


def _render(roadmap: ComplianceRoadmap, config: dict, company: str, completed: set[str]) -> str:
    from ..formatters.markdown import generate_roadmap_report

    if config["output"]["format"] == "json":
        return json.dumps(roadmap_to_dict(roadmap), indent=2, ensure_ascii=False)
    output = config["output"]
    return generate_roadmap_report(
        roadmap,
        company=company,
        completed=completed,
        include_gaps=output.get("include_gaps", True),
        include_policies=output.get("include_policies", True),
        include_evidence=output.get("include_evidence", True),
    )


def _emit(content: str, output: Optional[str]) -> None:
    if output:
        Path(output).write_text(content + "\n", encoding="utf-8")
        err_console.print(f"  [green]OK[/green] Wrote {output}")
    else:
        click.echo(content)


@click.group()
def soc2r_cli() -> None:
    """SOC 2 Roadmap - readiness roadmap, gap analysis and sprint plan."""


@soc2r_cli.command()
@click.option("--project", "-p", type=click.Path(exists=True, file_okay=False), required=True)
@click.option("--name", type=str, default="", help="Project name for the config file")
def init(project: str, name: str) -> None:
    """Initialize .soc2-roadmap/ in a project directory."""
    project_path = Path(project)
    initialize_project(project_path, name)
    err_console.print(f"  [green]Initialized[/green] .soc2-roadmap/ in {project_path.resolve().name}")


@soc2r_cli.command()
@click.pass_context
@click.argument("intake", type=click.Path(exists=True, dir_okay=False))
@click.option("--project", "-p", type=click.Path(exists=True, file_okay=False), required=True)
@click.option("--key", "-k", type=str, help="Storage key (default: company name)")
@click.option("--output-format", "-f", type=click.Choice(["markdown", "json"]))
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write the report to a file")
def generate(
    ctx: click.Context,
    intake: str,
    project: str,
    key: str | None,
    output_format: str | None,
    output: str | None,
) -> None:
    """Generate and store a roadmap from an intake file (YAML or JSON).

    Example: soc2r generate intake.yaml -p . -f markdown -o roadmap.md
    """
    from ..core.engine import generate_roadmap
    from ..core.intake import IntakeError, load_intake

    project_path = Path(project)
    cli_overrides = {"output": {"format": output_format}} if output_format else None
    config = _load_config(ctx, project_path, cli_overrides)

    try:
        form = load_intake(Path(intake))
    except IntakeError as e:
        err_console.print(f"  [red]ERROR[/red] {escape(sanitize_error(str(e)))}")
        for problem in e.problems:
            err_console.print(f"    - {escape(problem)}")
        ctx.exit(EXIT_INVALID_INTAKE)
        return

    roadmap = generate_roadmap(form)
    slug = sanitize_key(key or form.company_info.company_name)
    _repository(config).save(slug, roadmap)
    _intakes(config).save(slug, form)
    err_console.print(
        f"  [green]OK[/green] Stored roadmap '{slug}': score {roadmap.maturity_score}/100, "
        f"{roadmap.risk_level.value} risk, {roadmap.recommended_timeline} weeks"
    )

    completed = _task_store(config).load(slug)
    _emit(_render(roadmap, config, form.company_info.company_name, completed), output)


@soc2r_cli.command()
@click.pass_context
@click.option("--project", "-p", type=click.Path(exists=True, file_okay=False), required=True)
@click.option("--key", "-k", type=str, required=True)
@click.option("--output-format", "-f", type=click.Choice(["markdown", "json"]))
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write the report to a file")
def report(ctx: click.Context, project: str, key: str, output_format: str | None, output: str | None) -> None:
    """Re-render a stored roadmap with current task completion."""
    cli_overrides = {"output": {"format": output_format}} if output_format else None
    config = _load_config(ctx, Path(project), cli_overrides)
    roadmap = _load_roadmap(ctx, config, key)
    intake = _intakes(config).load(key)
    company = intake.company_info.company_name if intake else ""
    completed = _task_store(config).load(key)
    _emit(_render(roadmap, config, company, completed), output)


def _set_task(ctx: click.Context, project: str, key: str, task_id: str, completed: bool) -> None:
    from ..core.progress import task_ids

    config = _load_config(ctx, Path(project))
    roadmap = _load_roadmap(ctx, config, key)
    known = task_ids(roadmap)
    if task_id not in known:
        err_console.print(f"  [red]ERROR[/red] Unknown task id '{task_id}' for roadmap '{sanitize_key(key)}'")
        ctx.exit(EXIT_UNKNOWN_TASK)
        return

    done = _task_store(config).set_completed(key, task_id, completed)
    verb = "Completed" if completed else "Reopened"
    err_console.print(f"  [green]OK[/green] {verb} {task_id} ({len(done & known)}/{len(known)} tasks done)")


@soc2r_cli.command()
@click.pass_context
@click.argument("task_id")
@click.option("--project", "-p", type=click.Path(exists=True, file_okay=False), required=True)
@click.option("--key", "-k", type=str, required=True)
def complete(ctx: click.Context, task_id: str, project: str, key: str) -> None:
    """Mark a roadmap task as done.

    Example: soc2r complete s1-mfa -p . -k acme
    """
    _set_task(ctx, project, key, task_id, completed=True)


@soc2r_cli.command()
@click.pass_context
@click.argument("task_id")
@click.option("--project", "-p", type=click.Path(exists=True, file_okay=False), required=True)
@click.option("--key", "-k", type=str, required=True)
def reopen(ctx: click.Context, task_id: str, project: str, key: str) -> None:
    """Mark a completed task as open again."""
    _set_task(ctx, project, key, task_id, completed=False)


@soc2r_cli.command()
@click.pass_context
@click.option("--project", "-p", type=click.Path(exists=True, file_okay=False), required=True)
@click.option("--key", "-k", type=str, required=True)
def progress(ctx: click.Context, project: str, key: str) -> None:
    """Show sprint completion, open urgent tasks and missing policies."""
    from ..core.progress import summarize_progress

    config = _load_config(ctx, Path(project))
    roadmap = _load_roadmap(ctx, config, key)
    summary = summarize_progress(roadmap, _task_store(config).load(key))

    console.print()
    console.print(f"  [bold cyan]SOC 2 ROADMAP[/bold cyan] {sanitize_key(key)}")
    console.print(
        f"  Score: [white]{roadmap.maturity_score}/100[/white]  "
        f"Risk: [white]{roadmap.risk_level.value.upper()}[/white]  "
        f"Timeline: [white]{roadmap.recommended_timeline} weeks[/white]"
    )
    console.print()

    table = Table(title="Sprints")
    table.add_column("#", justify="right")
    table.add_column("Sprint")
    table.add_column("Done", justify="right")
    table.add_column("%", justify="right")
    table.add_column("Critical open", justify="right")
    for sprint in summary.sprints:
        table.add_row(
            str(sprint.number),
            sprint.name,
            f"{sprint.done}/{sprint.total}",
            str(sprint.percent),
            str(sprint.critical_open),
        )
    console.print(table)

    console.print(f"  Overall: {summary.done}/{summary.total} tasks ({summary.percent}%)")
    console.print(f"  Evidence: {summary.evidence.have} collected, {summary.evidence.need} to collect")

    if summary.urgent_open:
        console.print()
        console.print("  [yellow]Open urgent tasks[/yellow]")
        for task in summary.urgent_open:
            console.print(f"    {task.id}: {task.title} ({task.priority.value})")

    if summary.missing_policies:
        console.print()
        console.print("  [yellow]Missing policies[/yellow]")
        for policy in summary.missing_policies:
            console.print(f"    {policy.name}")

    for task_id in summary.unknown_ids:
        err_console.print(f"  [yellow]WARN[/yellow] Completed id '{task_id}' is not in this roadmap")


@soc2r_cli.command()
@click.pass_context
@click.option("--project", "-p", type=click.Path(exists=True, file_okay=False), required=True)
@click.option("--key", "-k", type=str, required=True)
@click.option("--output-format", "-f", type=click.Choice(["table", "json"]), default="table")
def vendors(ctx: click.Context, project: str, key: str, output_format: str) -> None:
    """List the vendor inventory implied by a stored intake.

    Example: soc2r vendors -p . -k acme -f json
    """
    from ..core.vendors import auto_populate_vendors

    config = _load_config(ctx, Path(project))
    intake = _intakes(config).load(key)
    if intake is None:
        err_console.print(f"  [red]ERROR[/red] No intake stored for key '{sanitize_key(key)}'. Run: soc2r generate")
        ctx.exit(EXIT_NOT_FOUND)
        return

    inventory = auto_populate_vendors(intake)
    if output_format == "json":
        click.echo(json.dumps(
            [v.model_dump(mode="json", by_alias=True) for v in inventory],
            indent=2,
            ensure_ascii=False,
        ))
        return

    table = Table(title=f"Vendors ({intake.company_info.company_name})")
    table.add_column("Vendor")
    table.add_column("Category")
    table.add_column("Tier")
    table.add_column("Prod access")
    table.add_column("Next review")
    for vendor in inventory:
        table.add_row(
            vendor.name,
            vendor.category.value,
            vendor.risk_tier.value,
            "yes" if vendor.has_production_access else "no",
            vendor.next_review_due.isoformat() if vendor.next_review_due else "-",
        )
    console.print(table)


def main() -> None:
    soc2r_cli()


if __name__ == "__main__":
    main()
