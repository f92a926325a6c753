import tempfile

import click
from click_option_group import optgroup
from halo import Halo

from tk.config import Settings
from tk.shared.exec import Deadline
from tk.shared.tools import tk_log
from tk.sources import (
    GitSource,
    apply_source,
    provision,
    render_git_source,
    resolve_source_input,
    wait_for_source,
)

spinner = Halo(text_color="blue", spinner="dots")

_examples = """
\b
Examples:
  # Create a gitrepository.source.fluxcd.io for a public repository
  tk create source podinfo --git-url https://github.com/stefanprodan/podinfo-deploy --git-branch master

\b
  # Create a gitrepository.source.fluxcd.io that syncs tags based on a semver range
  tk create source podinfo --git-url https://github.com/stefanprodan/podinfo-deploy --git-semver=">=0.0.1-rc.1 <0.1.0"

\b
  # Create a gitrepository.source.fluxcd.io with SSH authentication
  tk create source podinfo --git-url ssh://git@github.com/stefanprodan/podinfo-deploy

\b
  # Create a gitrepository.source.fluxcd.io with basic authentication
  tk create source podinfo --git-url https://github.com/stefanprodan/podinfo-deploy -u username -p password
"""


def create_source(
    settings: Settings,
    name: str | None,
    git_url: str | None,
    git_branch: str = "master",
    git_semver: str | None = None,
    username: str | None = None,
    password: str | None = None,
) -> GitSource:
    """Provisions a GitRepository source and its credentials, then waits for it to sync.

    The SSH keys are generated in a temporary directory that is removed on every exit
    path, including the operator declining the deploy key prompt.

    Returns:
        GitSource: The source that was applied.
    """
    _input = resolve_source_input(
        name,
        git_url,
        branch=git_branch,
        semver=git_semver,
        username=username,
        password=password,
    )
    _deadline = Deadline(settings.timeout)

    with tempfile.TemporaryDirectory(prefix=f"{_input.name}-") as _tmpdir:
        _credentials = provision(_input.auth, _input.name, settings, _tmpdir, deadline=_deadline)

        spinner.info(f"generating source {_input.name} in {settings.namespace} namespace")
        _source = GitSource(
            name=_input.name,
            namespace=settings.namespace,
            url=_input.url,
            interval=settings.interval,
            branch=_input.branch,
            semver=_input.semver,
            secret_ref=_credentials.name if _credentials is not None else None,
        )

        _manifest = render_git_source(_source)
        if settings.verbose:
            tk_log(f"rendered manifest\n{_manifest}", level="debug")

        apply_source(settings, _manifest, deadline=_deadline)
        wait_for_source(settings, _source.name, deadline=_deadline)

    return _source


@click.command("source", epilog=_examples)
@click.argument("name", required=False)
@click.option(
    "--git-url",
    "git_url",
    required=False,
    help="git address, e.g. ssh://git@host/org/repository",
)
@click.option(
    "--git-branch",
    "git_branch",
    default="master",
    show_default=True,
    help="git branch",
)
@click.option(
    "--git-semver",
    "git_semver",
    default=None,
    help="git tag semver range, takes precedence over --git-branch",
)
@optgroup.group("Basic authentication", help="Credentials for git over HTTP(S)")
@optgroup.option("-u", "--username", required=False, help="basic authentication username")
@optgroup.option("-p", "--password", required=False, help="basic authentication password")
@click.pass_obj
def source_command(settings: Settings, **params: dict) -> None:
    """Create source resource.

    The create source command generates a source.fluxcd.io resource and waits for it to sync.
    For Git over SSH, host and SSH keys are automatically generated.
    """
    create_source(
        settings,
        params["name"],
        params["git_url"],
        git_branch=params["git_branch"],
        git_semver=params["git_semver"],
        username=params["username"],
        password=params["password"],
    )
