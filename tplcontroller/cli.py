"""Command-line interface for controlling devices."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from collections.abc import Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any, NoReturn

import asyncclick as click
from rich import print as _echo
from rich.logging import RichHandler
from rich.markup import escape

from tplcontroller import COMMANDS, ActionResult, TplController
from tplcontroller.commands import TOGGLE, get_command

LED_STATES = ["on", "off", TOGGLE]
DEFAULT_TIMEOUT = 5


def echo(*args, **kwargs) -> None:
    """Print a message unless json output was requested."""
    ctx = click.get_current_context().find_root()
    if "json" not in ctx.params or ctx.params["json"] is False:
        _echo(*args, **kwargs)


def error(msg: str) -> NoReturn:
    """Print an error and exit."""
    echo(f"[bold red]{msg}[/bold red]")
    sys.exit(1)


def json_formatter_cb(result: Any, **kwargs) -> None:
    """Format and output the result as JSON, if requested."""
    if not kwargs.get("json"):
        return

    print(json.dumps(result, indent=4))


@click.group(result_callback=json_formatter_cb)
@click.option(
    "--host",
    "hosts",
    envvar="TPL_HOST",
    multiple=True,
    help="The host name or IP address of a device, can be given multiple times.",
)
@click.option(
    "--password",
    envvar="TPL_PASSWORD",
    default=None,
    required=False,
    help="Password of the device web interface.",
)
@click.option(
    "--timeout",
    envvar="TPL_TIMEOUT",
    default=DEFAULT_TIMEOUT,
    required=False,
    show_default=True,
    type=int,
    help="Timeout for device communications.",
)
@click.option(
    "-d",
    "--debug",
    envvar="TPL_DEBUG",
    default=False,
    is_flag=True,
    help="Print debug output",
)
@click.option(
    "--json/--no-json",
    envvar="TPL_JSON",
    default=False,
    is_flag=True,
    help="Output the results as JSON.",
)
@click.version_option(package_name="python-tplcontroller")
@click.pass_context
async def cli(ctx, hosts, password, timeout, debug, json):
    """A tool for controlling TP-Link web managed devices."""
    # no need to perform any checks if we are just displaying the help
    if "--help" in sys.argv:
        ctx.obj = []
        return

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(show_time=False)],
    )

    if ctx.invoked_subcommand == "commands":
        return

    if not hosts:
        error("At least one --host is required")

    if not password:
        raise click.BadOptionUsage(
            "password", "Controlling a device requires --password"
        )

    controllers = [
        TplController.from_values(host, password, timeout=timeout) for host in hosts
    ]

    @asynccontextmanager
    async def async_wrapped_controllers(controllers: list[TplController]):
        try:
            yield controllers
        finally:
            await asyncio.gather(*(ctrl.close() for ctrl in controllers))

    ctx.obj = await ctx.with_async_resource(async_wrapped_controllers(controllers))


async def _run(
    controllers: list[TplController],
    action: Callable[[TplController], Awaitable[ActionResult]],
) -> dict[str, ActionResult]:
    """Run action on all devices concurrently and print the outcome per host."""
    results = await asyncio.gather(*(action(ctrl) for ctrl in controllers))
    for ctrl, result in zip(controllers, results):
        echo(f"{escape(ctrl.host)} {escape(result.get('state', ''))}")

    return {ctrl.host: result for ctrl, result in zip(controllers, results)}


@cli.command()
@click.argument(
    "state",
    type=click.Choice(LED_STATES, case_sensitive=False),
    default=TOGGLE,
    required=False,
)
@click.pass_obj
async def led(controllers: list[TplController], state: str):
    """Turn the LED on, off or toggle it."""
    return await _run(controllers, lambda ctrl: ctrl.turn_led(state))


@cli.command("set")
@click.option(
    "--command",
    "command_name",
    default="led",
    show_default=True,
    type=click.Choice(list(COMMANDS), case_sensitive=False),
    help="The command group to change.",
)
@click.argument("states", nargs=-1, required=True)
@click.pass_obj
async def set_states(
    controllers: list[TplController], command_name: str, states: tuple[str, ...]
):
    """Set KEY=VALUE states of a command group."""
    desired = {}
    for item in states:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise click.BadParameter(
                f"{item} is not in KEY=VALUE format", param_hint="STATES"
            )
        desired[key] = value

    command = get_command(command_name)
    return await _run(controllers, lambda ctrl: ctrl.turn_feature(command, desired))


@cli.command("commands")
async def list_commands():
    """List the known command groups and their keys."""
    result = {}
    for name, command in COMMANDS.items():
        echo(f"[bold]{name}[/bold] ({command.id})")
        keys = {}
        for key, spec in command.keys.items():
            values = ", ".join(spec.aliases) if spec.aliases else "raw values"
            toggle = f", {TOGGLE}" if spec.toggle else ""
            echo(f"\t{key}: {values}{toggle}")
            keys[key] = {
                "aliases": dict(spec.aliases) if spec.aliases else None,
                "toggle": spec.toggle,
            }
        result[name] = {"id": command.id, "keys": keys}

    return result


if __name__ == "__main__":
    cli()
