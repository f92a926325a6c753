#!/usr/bin/python3
#
# Copyright (C) 2025, The tk Authors.
#
__name__ = "tk"
__author__ = "The tk Authors"

import os

import click

from tk.config import MetaData, Settings
from tk.shared.commands import OrderedGroup
from tk.shared.tools import Duration, docstrings, parse_duration
from tk.create import create as create_group

metadata = MetaData()


### CLI
@click.group(cls=OrderedGroup, invoke_without_command=True)
@click.option(
    "-n",
    "--namespace",
    default=metadata.namespace,
    show_default=True,
    help="the namespace scope for this operation",
)
@click.option(
    "--timeout",
    default=metadata.timeout,
    show_default=True,
    type=Duration(),
    help="timeout for this operation",
)
@click.option(
    "--verbose",
    default=False,
    is_flag=True,
    help="print generated objects",
)
@click.option(
    "--kubeconfig",
    default=metadata.kubeconfig or None,
    help="path to the kubeconfig file, kubectl resolves it when unset",
)
@click.version_option(package_name=metadata._name)
@docstrings(metadata._name)
@click.pass_context
def cli(ctx: click.Context, **params: dict) -> None:
    """{0} - Command line utility for assembling Kubernetes CD pipelines."""
    _kubeconfig = params["kubeconfig"]
    ctx.obj = Settings(
        namespace=params["namespace"],
        timeout=parse_duration(params["timeout"]),
        verbose=params["verbose"],
        kubeconfig=os.path.expanduser(_kubeconfig) if _kubeconfig else None,
    )

    # If there is nothing passed to the CLI, print the help message
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


cli.add_command(create_group)
