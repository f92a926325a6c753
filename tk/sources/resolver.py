"""
Resolves the `create source` input into a validated SourceInput.

The authentication strategy is chosen here, once, from the URL scheme and the
presence of basic auth credentials:

    ssh://...                      -> SSHAuth
    https://... -u user -p pass    -> BasicAuth
    anything else                  -> NoAuth
"""
import re
import urllib.parse
from dataclasses import dataclass, field

from tk.shared.errors import ValidationError
from tk.sources.auth import AuthStrategy, BasicAuth, NoAuth, SSHAuth

DEFAULT_BRANCH = "master"

# The name becomes metadata.name, the secret name and the transient directory prefix,
# so it has to be a DNS-1123 subdomain.
NAME_MAX_LENGTH = 253
_name_pattern = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?(\.[a-z0-9]([-a-z0-9]*[a-z0-9])?)*$")


@dataclass(frozen=True)
class SourceInput:
    name: str
    url: str
    branch: str = DEFAULT_BRANCH
    semver: str = ""
    auth: AuthStrategy = field(default_factory=NoAuth)


def is_ssh_url(url: str) -> bool:
    """Returns True when the URL asks for git over SSH, i.e. ssh://git@github.com/org/repo.

    The prefix check is case-sensitive, an upper case SSH:// scheme is not treated as SSH.
    """
    return url.strip().startswith("ssh")


def validate_name(name: str) -> str:
    """Checks the source name is a valid Kubernetes resource name.

    Raises:
        ValidationError: If the name is too long, or is not a lower case DNS-1123 subdomain.
    """
    if len(name) > NAME_MAX_LENGTH or not _name_pattern.match(name):
        raise ValidationError(
            f"invalid source name {name!r}: must consist of lower case alphanumeric characters, "
            f"'-' or '.', start and end with an alphanumeric character, and be at most "
            f"{NAME_MAX_LENGTH} characters"
        )

    return name


def parse_git_url(url: str) -> urllib.parse.SplitResult:
    """Parses the repository address, a scheme and a host are required.

    Raises:
        ValidationError: If the URL can not be parsed.
    """
    try:
        _parsed = urllib.parse.urlsplit(url)
        _parsed.port  # raises ValueError on an out of range or non numeric port
    except ValueError as e:
        raise ValidationError(f"git URL parse failed: {e}") from e

    if not _parsed.scheme or not _parsed.hostname:
        raise ValidationError(f"git URL parse failed: {url!r} has no scheme or host")

    return _parsed


def select_auth(parsed: urllib.parse.SplitResult, url: str, username: str | None, password: str | None) -> AuthStrategy:
    if is_ssh_url(url):
        return SSHAuth(host=parsed.hostname, port=parsed.port)

    if username and password:
        return BasicAuth(username=username, password=password)

    return NoAuth()


def resolve_source_input(
    name: str | None,
    url: str | None,
    branch: str | None = DEFAULT_BRANCH,
    semver: str | None = None,
    username: str | None = None,
    password: str | None = None,
) -> SourceInput:
    """Validates the command input and selects the authentication strategy.

    Raises:
        ValidationError: If the name or URL is missing, the name is not a valid resource
            name, the branch is empty, or the URL does not parse.
    """
    if not name or not name.strip():
        raise ValidationError("source name is required")

    _name = validate_name(name.strip())

    if not url or not url.strip():
        raise ValidationError("git-url is required")

    if branch is None:
        branch = DEFAULT_BRANCH
    if not branch.strip():
        raise ValidationError("git-branch must not be empty")

    _url = url.strip()
    _parsed = parse_git_url(_url)

    return SourceInput(
        name=_name,
        url=_url,
        branch=branch.strip(),
        semver=(semver or "").strip(),
        auth=select_auth(_parsed, _url, username, password),
    )
