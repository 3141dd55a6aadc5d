# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""secureheaders CLI — validate configuration files and preview resolved headers."""

from __future__ import annotations

from pathlib import Path

import click
from rich.markup import escape
from rich.table import Table

from secureheaders.cli.console import console, err_console
from secureheaders.config import Config, configure_from_config
from secureheaders.engine import SecureHeaders
from secureheaders.exceptions import SecureHeadersException
from secureheaders.logging import StructlogAdapter
from secureheaders.request import RequestContext


@click.group()
@click.version_option(package_name="secureheaders")
def cli() -> None:
    """secureheaders — security response header configuration."""


@click.command("check")
@click.argument("config_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--profile", "profiles", multiple=True, help="Profile overlay to apply (repeatable).")
@click.option("--name", default=None, help="Named configuration to resolve instead of the default.")
@click.option("--user-agent", default=None, help="User-Agent of the simulated request.")
@click.option("--insecure", is_flag=True, help="Simulate a plaintext (non-TLS) request.")
@click.option("--nonce", is_flag=True, help="Request a script nonce before resolving.")
@click.option("-v", "--verbose", count=True, help="Log engine events to stderr (-v info, -vv debug).")
def check_command(
    config_file: Path,
    profiles: tuple[str, ...],
    name: str | None,
    user_agent: str | None,
    insecure: bool,
    nonce: bool,
    verbose: int,
) -> None:
    """Validate CONFIG_FILE and print the headers a request would receive."""
    engine = SecureHeaders()
    try:
        config = Config.from_file(config_file, active_profiles=list(profiles))
        StructlogAdapter().configure(config, verbosity=verbose)
        configurations = configure_from_config(config, engine)
        request = RequestContext(is_secure=not insecure, user_agent=user_agent)
        if name:
            engine.use_configuration(request, name)
        if nonce:
            engine.nonce_for_script(request)
        headers = engine.resolve_headers(request)
    except SecureHeadersException as exc:
        err_console.print(f"[error]Invalid configuration:[/error] {escape(str(exc))}")
        raise SystemExit(1) from exc

    console.print(f"[success]OK[/success] [dim]{', '.join(configurations)}[/dim]")
    table = Table(title=f"Headers ({name or 'default'})", border_style="dim")
    table.add_column("Header", style="header")
    table.add_column("Value")
    for header, value in headers.items():
        table.add_row(header, value)
    console.print(table)


cli.add_command(check_command, name="check")


def main() -> None:
    cli()
