# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

import asyncio
import logging
from typing import Any

import click

from postgrest_builder.builder import Builder
from postgrest_builder.client import Client
from postgrest_builder.config import ClientConfig
from postgrest_builder.exceptions import PostgrestBuilderError
from postgrest_builder.transport.types import GatewayRequest


def parse_assignment(raw: str) -> tuple[str, str]:
    if "=" not in raw:
        raise click.BadParameter("'%s' is not a COLUMN=VALUE pair" % raw)
    column, value = raw.split("=", 1)
    return column, value


def echo_request(request: GatewayRequest) -> None:
    click.echo(f"{request.method} {request.full_url()}")
    for name, value in request.headers:
        click.echo(f"{name}: {value}")
    if request.body is not None:
        click.echo("")
        click.echo(request.body.decode("utf-8", errors="replace"))


async def send(client: Client, builder: Builder) -> None:
    async with client:
        response = await builder.execute()
    click.echo(f"HTTP {response.status_code}")
    click.echo(response.text())


def run(client: Client, builder: Builder, dry_run: bool) -> None:
    try:
        if dry_run:
            echo_request(builder.build())
        else:
            asyncio.run(send(client, builder))
    except PostgrestBuilderError as err:
        raise click.ClickException(str(err)) from err


url_option = click.option(
    "--url",
    envvar="POSTGREST_URL",
    required=True,
    help="Base URL of the gateway",
)
schema_option = click.option(
    "--schema",
    envvar="POSTGREST_SCHEMA",
    type=str,
    default=None,
    help="Schema selected through the profile headers",
)
token_option = click.option(
    "--token",
    envvar="POSTGREST_TOKEN",
    default=None,
    help="Bearer token sent in the Authorization header",
)
dry_run_option = click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Print the request instead of sending it",
)


def make_client(url: str, schema: str | None, token: str | None) -> Client:
    """
    Build the client from the POSTGREST_* environment (timeout, profile
    policy, api key, extra headers); command line options take precedence.
    """
    config = ClientConfig.from_env(base_url=url)
    if schema is not None:
        config.schema = schema
    if token is not None:
        config.headers["Authorization"] = f"Bearer {token}"
    return Client.from_config(config)


@click.group()
@click.option("--verbose", is_flag=True, default=False, help="Enable debug logs")
def cli(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG)


@cli.command()
@click.argument("table", type=str)
@url_option
@schema_option
@token_option
@click.option("--select", "columns", type=str, default="*", help="Columns to read")
@click.option(
    "--eq",
    "equals",
    multiple=True,
    type=str,
    help="COLUMN=VALUE equality filter, can be repeated",
)
@click.option("--order", type=str, default=None, help="Raw order expression")
@click.option("--limit", type=int, default=None, help="Maximum number of rows")
@click.option(
    "--count",
    type=click.Choice(["exact", "planned", "estimated"]),
    default=None,
    help="Ask the gateway for a row count",
)
@click.option("--single", is_flag=True, default=False, help="Expect a single row")
@dry_run_option
def request(
    table: str,
    url: str,
    schema: str | None,
    token: str | None,
    columns: str,
    equals: tuple[str, ...],
    order: str | None,
    limit: int | None,
    count: Any,
    single: bool,
    dry_run: bool,
) -> None:
    """Read rows of TABLE."""
    try:
        client = make_client(url, schema, token)
        builder = client.from_(table).select(columns)
        for raw in equals:
            builder = builder.eq(*parse_assignment(raw))
        if order is not None:
            builder = builder.order(order)
        if limit is not None:
            builder = builder.limit(limit)
        if count is not None:
            builder = builder.count(count)
        if single:
            builder = builder.single()
    except PostgrestBuilderError as err:
        raise click.ClickException(str(err)) from err

    run(client, builder, dry_run)


@cli.command()
@click.argument("function", type=str)
@click.argument("params", type=str, default="{}")
@url_option
@schema_option
@token_option
@dry_run_option
def rpc(
    function: str,
    params: str,
    url: str,
    schema: str | None,
    token: str | None,
    dry_run: bool,
) -> None:
    """Call the stored procedure FUNCTION with the PARAMS json object."""
    try:
        client = make_client(url, schema, token)
        builder = client.rpc(function, params)
    except PostgrestBuilderError as err:
        raise click.ClickException(str(err)) from err

    run(client, builder, dry_run)


if __name__ == "__main__":
    cli()
