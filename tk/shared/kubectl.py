from tk.config import Settings
from tk.shared.exec import Deadline, Mode, exec_command


def kubectl(settings: Settings, *args: str) -> list:
    """Builds a kubectl command, pinned to the configured kubeconfig when one is set."""
    _cmd = ["kubectl"]
    if settings.kubeconfig:
        _cmd += ["--kubeconfig", settings.kubeconfig]

    return _cmd + list(args)


def apply_manifest(settings: Settings, manifest: str, deadline: Deadline | None = None, mode: Mode = Mode.STDERR_OS) -> str:
    """Applies a manifest with kubectl, the document is passed on stdin."""
    return exec_command(
        kubectl(settings, "apply", "-f", "-"),
        mode=mode,
        deadline=deadline,
        input=manifest,
        verbose=settings.verbose,
    )


def create_or_replace_secret(settings: Settings, name: str, sources: list, deadline: Deadline | None = None) -> None:
    """Creates a generic secret in the settings namespace, or replaces the one already there.

    The secret is rendered client side and then applied, so re-running with the
    same name overwrites the previous data.

    Args:
        settings (Settings): The run settings -- namespace and kubeconfig.
        name (str): The secret name.
        sources (list): kubectl data flags, i.e. ["--from-literal=username=...", "--from-file=/tmp/identity"].
        deadline (Deadline, optional): Bounds both kubectl calls.
    """
    _create = kubectl(
        settings,
        "-n", settings.namespace,
        "create", "secret", "generic", name,
        *sources,
        "--dry-run=client", "-o", "yaml",
    )
    # The rendered secret carries the credentials, keep it off the terminal
    _secret = exec_command(_create, mode=Mode.CAPTURE, deadline=deadline)
    apply_manifest(settings, _secret, deadline=deadline, mode=Mode.CAPTURE)
