"""CLI entrypoint for handoff."""

import logging
import sys
from pathlib import Path

import click

from . import __version__, get_version_string
from .naming.frontmatter import parse_tags

PROJECT_ARG = click.argument(
    "project",
    type=click.Path(file_okay=False, dir_okay=True, path_type=Path),
    default=".",
    required=False,
)

SESSION_OPT = click.option(
    "--session",
    "-s",
    type=str,
    default=None,
    metavar="SLUG",
    help="Session slug (docs/handoff-SLUG); defaults to docs/handoff",
)

TAGS_OPT = click.option(
    "--tags",
    type=str,
    default=None,
    metavar="CSV",
    help="Comma-separated topic tags, e.g. checkout,stripe",
)

DRY_RUN_OPT = click.option(
    "--dry-run",
    is_flag=True,
    help="Show what would be done without writing anything",
)


@click.group()
@click.version_option(__version__, prog_name="handoff")
@click.option("--verbose", "-v", is_flag=True, help="Log diagnostic details to stderr")
def cli(verbose: bool) -> None:
    """handoff - Agent-to-agent handoff documentation.

    Scaffold, validate, score and migrate numbered handoff documents so the
    next agent can find state, context and findings quickly.
    """
    if verbose:
        from rich.logging import RichHandler

        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(show_path=False)],
        )


@cli.command()
@PROJECT_ARG
@SESSION_OPT
@TAGS_OPT
@click.option("--topic", type=str, default=None, help="One-line topic written into frontmatter")
@click.option("--full", is_flag=True, help="Also create the recommended documents (06-14)")
@DRY_RUN_OPT
def init(project: Path, session: str | None, tags: str | None, topic: str | None, full: bool, dry_run: bool) -> None:
    """Scaffold handoff docs for a project.

    Examples:

        handoff init my-project --session checkout-refactor --tags checkout,stripe
    """
    from .commands.init import run_init

    sys.exit(run_init(project, session=session, tags=parse_tags(tags), topic=topic, full=full, dry_run=dry_run))


@cli.command()
@PROJECT_ARG
@SESSION_OPT
@DRY_RUN_OPT
def generate(project: Path, session: str | None, dry_run: bool) -> None:
    """Generate the PROJECT_STATE document (gates, commits, inventory)."""
    from .commands.generate import run_generate

    sys.exit(run_generate(project, session=session, dry_run=dry_run))


@cli.command()
@PROJECT_ARG
@SESSION_OPT
@click.option("--all", "all_sessions", is_flag=True, help="Validate every handoff* folder under docs/")
@click.option("--detailed", is_flag=True, help="Show improvement hints and recommendations")
@click.option("--json", "output_json", is_flag=True, help="Output results as JSON")
def validate(project: Path, session: str | None, all_sessions: bool, detailed: bool, output_json: bool) -> None:
    """Score handoff docs against the quality rubric."""
    from .commands.validate import run_validate

    sys.exit(
        run_validate(
            project,
            session=session,
            all_sessions=all_sessions,
            detailed=detailed,
            output_json=output_json,
        )
    )


@cli.command("validate:naming")
@PROJECT_ARG
@SESSION_OPT
@click.option("--json", "output_json", is_flag=True, help="Output results as JSON")
def validate_naming(project: Path, session: str | None, output_json: bool) -> None:
    """Validate file naming (NN-SLUG_YYYY-MM-DD.md) and required docs."""
    from .commands.validate_naming import run_validate_naming

    sys.exit(run_validate_naming(project, session=session, output_json=output_json))


@cli.command()
@PROJECT_ARG
@SESSION_OPT
@click.option("--to-session", type=str, default=None, metavar="SLUG", help="Move migrated docs into this session")
@TAGS_OPT
@DRY_RUN_OPT
def migrate(project: Path, session: str | None, to_session: str | None, tags: str | None, dry_run: bool) -> None:
    """Migrate legacy docs to canonical numeric names.

    The plan is printed first and every source file is backed up before it
    is renamed.
    """
    from .commands.migrate import run_migrate

    sys.exit(run_migrate(project, session=session, to_session=to_session, tags=parse_tags(tags), dry_run=dry_run))


@cli.command("tag-index")
@PROJECT_ARG
@DRY_RUN_OPT
def tag_index(project: Path, dry_run: bool) -> None:
    """Rebuild docs/TAG_INDEX.md from every session's frontmatter tags."""
    from .commands.tag_index import run_tag_index

    sys.exit(run_tag_index(project, dry_run=dry_run))


@cli.command()
def version() -> None:
    """Show version."""
    click.echo(get_version_string())


@cli.command("help")
@click.pass_context
def help_(ctx: click.Context) -> None:
    """Show this help."""
    click.echo(ctx.parent.get_help())


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
