from halo import Halo

from tk.config import Settings
from tk.shared.errors import ApplyError, CommandError
from tk.shared.exec import Deadline, Mode, exec_command
from tk.shared.kubectl import apply_manifest, kubectl

_applyspinner = Halo(text_color="blue", spinner="dots")

WAIT_TIMEOUT: str = "1m"


def apply_source(settings: Settings, manifest: str, deadline: Deadline | None = None) -> None:
    """Applies the rendered GitRepository manifest to the cluster."""
    try:
        apply_manifest(settings, manifest, deadline=deadline)
    except CommandError as e:
        raise ApplyError("source apply failed") from e


def wait_for_source(settings: Settings, name: str, deadline: Deadline | None = None) -> None:
    """Waits for the GitRepository to report the ready condition.

    kubectl gives up after WAIT_TIMEOUT, independently of the run deadline.

    Raises:
        ApplyError: If the source is not ready in time, or kubectl fails.
    """
    _cmd = kubectl(
        settings,
        "-n", settings.namespace,
        "wait", f"gitrepository/{name}",
        "--for=condition=ready",
        f"--timeout={WAIT_TIMEOUT}",
    )

    _applyspinner.start("waiting for source sync")
    try:
        exec_command(_cmd, mode=Mode.CAPTURE, deadline=deadline, verbose=settings.verbose)
    except CommandError as e:
        _applyspinner.fail(e.stderr.strip() or str(e))
        raise ApplyError("source sync failed") from e

    _applyspinner.succeed(f"source {name} is ready")
