from dataclasses import dataclass

import yaml

API_VERSION: str = "source.fluxcd.io/v1alpha1"
KIND: str = "GitRepository"


@dataclass(frozen=True)
class GitSource:
    name: str
    namespace: str
    url: str
    interval: str
    branch: str = "master"
    semver: str = ""
    secret_ref: str | None = None

    @property
    def with_auth(self) -> bool:
        return self.secret_ref is not None

    @property
    def ref(self) -> dict:
        """The revision selector, a semver range takes precedence over the branch."""
        if self.semver:
            return {"semver": self.semver}

        return {"branch": self.branch}


class _ManifestDumper(yaml.SafeDumper):
    pass


def str_presenter(dumper, data):
    if '\n' in data:  # check for multiline string
        return dumper.represent_scalar('tag:yaml.org,2002:str', data, style='|')
    return dumper.represent_scalar('tag:yaml.org,2002:str', data)


_ManifestDumper.add_representer(str, str_presenter)


def git_source_document(source: GitSource) -> dict:
    """Returns the GitRepository resource as a dict, in manifest key order."""
    _spec = {
        "interval": source.interval,
        "url": source.url,
        "ref": source.ref,
    }
    if source.with_auth:
        _spec["secretRef"] = {"name": source.name}

    return {
        "apiVersion": API_VERSION,
        "kind": KIND,
        "metadata": {
            "name": source.name,
            "namespace": source.namespace,
        },
        "spec": _spec,
    }


def render_git_source(source: GitSource) -> str:
    """Renders the GitRepository manifest of a source.

    The output only depends on the source, rendering the same source twice
    yields the same text.
    """
    return yaml.dump(
        git_source_document(source),
        Dumper=_ManifestDumper,
        explicit_start=True,
        default_flow_style=False,
        sort_keys=False,
    )
