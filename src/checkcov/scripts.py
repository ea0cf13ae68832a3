"""Utility helpers for generating CLI documentation artefacts."""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

import click
from click.shell_completion import BashComplete, FishComplete, ShellComplete, ZshComplete

if TYPE_CHECKING:
    from pathlib import Path

ShellName = Literal["bash", "zsh", "fish"]

_COMPLETE_CLASSES: dict[ShellName, type[ShellComplete]] = {
    "bash": BashComplete,
    "zsh": ZshComplete,
    "fish": FishComplete,
}

_COMPLETE_VAR = "_CHECKCOV_COMPLETE"

_EXIT_STATUS = """\
0  success
1  generic error (unexpected failure)
2  a package is below its minimum coverage
65 malformed coverage profile or Go source
66 coverage profile, source directory or config file missing
78 configuration error
"""


def _root_command() -> click.Group:
    from checkcov.cli.root import cli  # noqa: PLC0415

    assert isinstance(cli, click.Group)  # noqa: S101
    return cli


def _collect_option_flags(command: click.Command) -> tuple[str, ...]:
    flags: list[str] = []
    for param in command.params:
        if isinstance(param, click.Option):
            flags.extend(param.opts)
            flags.extend(param.secondary_opts)
    return tuple(sorted({flag for flag in flags if flag}))


def _plain_help(name: str, command: click.Command) -> str:
    """Return plain Click help for *command*.

    A plain command is built to avoid the Rich help formatter typer installs;
    man pages only need stable text.
    """
    plain = click.Command(
        name=name,
        params=command.params,
        help=command.help,
        epilog=command.epilog,
        context_settings=command.context_settings,
    )
    ctx = click.Context(plain, info_name=name)
    return plain.get_help(ctx).strip()


def build_man_page() -> str:
    """Return a plain-text manual page for :mod:`checkcov`'s CLI."""
    cli = _root_command()
    sections = [
        "CHECKCOV(1)\n",
        "NAME\n----\ncheckcov - per-package statement coverage checks for Go projects\n\n",
        "SYNOPSIS\n--------\ncheckcov COMMAND [OPTIONS] [PATH]\n\n",
        "DESCRIPTION\n-----------\n",
        _plain_help("checkcov", cli),
        "\n",
    ]
    for name in sorted(cli.commands):
        title = f"checkcov {name}"
        sections.extend([
            f"\n{title.upper()}\n{'-' * len(title)}\n",
            _plain_help(title, cli.commands[name]),
            "\n",
        ])
    sections.extend(["\nEXIT STATUS\n-----------\n", _EXIT_STATUS.strip(), "\n"])
    return "".join(sections)


def write_man_page(destination: Path) -> None:
    """Write the generated manual page to *destination*."""
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(build_man_page(), encoding="utf-8")


def build_completion_script(shell: ShellName) -> str:
    """Return a shell completion script for *shell*."""
    cli = _root_command()
    check = cli.commands["check"]
    complete_cls = _COMPLETE_CLASSES[shell]
    complete = complete_cls(cli, {}, "checkcov", _COMPLETE_VAR)
    script = complete.source()
    comment = "# checkcov check options: " + " ".join(_collect_option_flags(check))
    return f"{comment}\n{script}"


__all__ = ["ShellName", "build_completion_script", "build_man_page", "write_man_page"]
