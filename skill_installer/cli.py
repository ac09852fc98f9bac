"""CLI interface for the skill installer."""

from __future__ import annotations

import asyncio

import click
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from skill_installer import __version__

console = Console()
err_console = Console(stderr=True)

USAGE = """\
Skill Installer for Claude Code

Usage:
  install-skill <url> [skill-name]

Arguments:
  url         URL to the skill file or directory
              - Direct link to SKILL.md file
              - GitHub directory URL (e.g., https://github.com/user/repo/tree/main/skills/my-skill)
  skill-name  Optional: Custom name for the skill folder (defaults to name from frontmatter)

Options:
  -c, --config PATH  YAML config file (default: $SKILL_INSTALLER_CONFIG)
  -v, --verbose      Show debug logs
  --version          Show the version and exit
  -h, --help         Show this message and exit

Examples:
  install-skill https://raw.githubusercontent.com/user/repo/main/my-skill/SKILL.md
  install-skill https://github.com/user/repo/tree/main/skills/my-skill
  install-skill https://example.com/skill.md custom-skill-name

Installs to:
  - ~/.claude/skills/<skill-name>/
  - ~/.codex/skills/<skill-name>/
"""


class _UsageCommand(click.Command):
    """Command whose help page is the hand-written usage text."""

    def get_help(self, ctx: click.Context) -> str:
        return USAGE


@click.command(
    cls=_UsageCommand,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.argument("url", required=False)
@click.argument("skill_name", required=False)
@click.option("--config", "-c", "config_path", default=None, help="Config file path")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logs")
@click.version_option(version=__version__, prog_name="install-skill")
@click.pass_context
def cli(
    ctx: click.Context,
    url: str | None,
    skill_name: str | None,
    config_path: str | None,
    verbose: bool,
):
    """Install a skill into ~/.claude/skills and ~/.codex/skills."""
    if not url:
        click.echo(USAGE)
        ctx.exit(0)

    from skill_installer.config import load_config
    from skill_installer.errors import SkillInstallError
    from skill_installer.fetcher import Fetcher
    from skill_installer.installer import SkillInstaller
    from skill_installer.utils import setup_logging

    async def run_install():
        async with Fetcher.from_config(cfg) as fetcher:
            installer = SkillInstaller.from_config(cfg, fetcher)
            return await installer.install(url, skill_name)

    try:
        cfg = load_config(config_path)
        setup_logging("DEBUG" if verbose else cfg.logging.level, cfg.logging.format)

        console.print(f"[dim]Installing skill from: {escape(url)}[/]")
        result = asyncio.run(run_install())
    except (SkillInstallError, ValidationError, yaml.YAMLError, OSError) as e:
        err_console.print(f"[red]✗ Error: {escape(str(e))}[/]", soft_wrap=True)
        ctx.exit(1)

    console.print(f'[green]✓ Installed skill "{escape(result.name)}" to:[/]')
    for destination in result.destinations:
        console.print(f"  - {escape(str(destination))}", soft_wrap=True)
    if len(result.files) > 1:
        console.print(f"[dim]{len(result.files)} files installed[/]")


if __name__ == "__main__":
    cli()
