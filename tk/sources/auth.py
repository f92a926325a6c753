"""
Authentication for GitRepository sources.

A source authenticates in one of three ways, selected once by the resolver:

    NoAuth     - public repositories, no secret is created
    BasicAuth  - username/password stored as literals in a generic secret
    SSHAuth    - known_hosts, identity and identity.pub stored in a generic secret

The secret is always named after the source, and is referenced from the
GitRepository spec.secretRef.
"""
import sys
from dataclasses import dataclass, field
from typing import Callable, Union

import click
from halo import Halo

from tk.config import Settings
from tk.shared.errors import CommandError, ProvisionError
from tk.shared.exec import Deadline
from tk.shared.kubectl import create_or_replace_secret
from tk.sources import keys

_authspinner = Halo(text_color="blue", spinner="dots")


@dataclass(frozen=True)
class NoAuth:
    pass


@dataclass(frozen=True)
class BasicAuth:
    username: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class SSHAuth:
    host: str
    port: int | None = None


AuthStrategy = Union[NoAuth, BasicAuth, SSHAuth]


@dataclass(frozen=True)
class BasicAuthCredentials:
    name: str
    username: str
    password: str = field(repr=False)

    def secret_sources(self) -> list:
        # Passed on the kubectl command line, visible in the process list while it runs
        return [
            f"--from-literal=username={self.username}",
            f"--from-literal=password={self.password}",
        ]


@dataclass(frozen=True)
class SSHCredentials:
    name: str
    identity: str
    identity_pub: str
    known_hosts: str

    def artifacts(self) -> list:
        return [self.identity, self.identity_pub, self.known_hosts]

    def secret_sources(self) -> list:
        return [f"--from-file={i}" for i in self.artifacts()]


Credentials = Union[BasicAuthCredentials, SSHCredentials]


def confirm_deploy_key() -> bool:
    """Blocks until the operator confirms the deploy key was added to the repository."""
    try:
        return click.confirm("Have you added the deploy key to your repository", default=False)
    except click.Abort:
        # EOF or Ctrl-C on the prompt
        return False


def provision_basic_auth(auth: BasicAuth, name: str, settings: Settings, deadline: Deadline | None = None) -> BasicAuthCredentials:
    """Stores the username/password pair in the <name> secret of the settings namespace."""
    _authspinner.info("saving credentials")
    _credentials = BasicAuthCredentials(name=name, username=auth.username, password=auth.password)

    try:
        create_or_replace_secret(settings, name, _credentials.secret_sources(), deadline=deadline)
    except CommandError as e:
        raise ProvisionError("kubectl create secret failed") from e

    return _credentials


def provision_ssh(
    auth: SSHAuth,
    name: str,
    settings: Settings,
    directory: str,
    deadline: Deadline | None = None,
    confirm: Callable[[], bool] = confirm_deploy_key,
) -> SSHCredentials:
    """
    Generates the SSH credentials of a source, and stores them once the operator has
    added the deploy key to the git server.

    The steps run in order, and each one is fatal:
    1. scan the host key of the git server into known_hosts
    2. generate the deploy key (identity, identity.pub)
    3. print the public key
    4. wait for the operator confirmation -- declining exits the program with status 1
    5. store the three files in the <name> secret

    Args:
        auth (SSHAuth): The git server to scan.
        name (str): The source name, also the secret name.
        settings (Settings): The run settings.
        directory (str): The run's transient directory.
        deadline (Deadline, optional): Bounds the external calls.
        confirm (Callable, optional): The confirmation prompt.

    Returns:
        SSHCredentials: The stored credentials.
    """
    _authspinner.info(f"generating host key for {auth.host}")
    try:
        _known_hosts = keys.scan_host_key(auth.host, directory, port=auth.port, deadline=deadline, verbose=settings.verbose)
    except (CommandError, ValueError) as e:
        raise ProvisionError("ssh-keyscan failed") from e

    _authspinner.info("generating deploy key")
    try:
        _identity, _identity_pub = keys.generate_deploy_key(directory)
    except (OSError, ValueError) as e:
        raise ProvisionError("ssh-keygen failed") from e

    _credentials = SSHCredentials(
        name=name,
        identity=_identity,
        identity_pub=_identity_pub,
        known_hosts=_known_hosts,
    )

    _deploy_key = keys.read_public_key(_identity_pub)
    click.echo(_deploy_key)
    click.echo(keys.fingerprint(_deploy_key))

    if not confirm():
        _authspinner.fail("aborting")
        sys.exit(1)

    _authspinner.info("saving deploy key")
    try:
        create_or_replace_secret(settings, name, _credentials.secret_sources(), deadline=deadline)
    except CommandError as e:
        raise ProvisionError("create secret failed") from e

    return _credentials


def provision(auth: AuthStrategy, name: str, settings: Settings, directory: str, deadline: Deadline | None = None) -> Credentials | None:
    """Provisions the credentials the strategy asks for, NoAuth yields None."""
    if isinstance(auth, SSHAuth):
        return provision_ssh(auth, name, settings, directory, deadline=deadline)

    if isinstance(auth, BasicAuth):
        return provision_basic_auth(auth, name, settings, deadline=deadline)

    return None
