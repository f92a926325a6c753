# This module handles the SSH material a GitRepository needs to pull over SSH.
# The host key of the git server is scanned into known_hosts, and a fresh deploy key
# (identity, identity.pub) is generated. All files live in the run's transient directory,
# and are removed with it once they have been stored in the cluster.
import base64
import hashlib
import os

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from tk.shared.exec import Deadline, Mode, exec_command

IDENTITY: str = "identity"
IDENTITY_PUB: str = "identity.pub"
KNOWN_HOSTS: str = "known_hosts"

_key_size: int = 2048
_public_exponent: int = 65537


def scan_host_key(host: str, directory: str, port: int | None = None, deadline: Deadline | None = None, verbose: bool = False) -> str:
    """Scans the public host key of the git server into <directory>/known_hosts.

    Args:
        host (str): The git server hostname.
        directory (str): Where the known_hosts file is written.
        port (int, optional): The SSH port, when it is not the default one.

    Returns:
        str: The path of the known_hosts file.

    Raises:
        CommandError: If ssh-keyscan fails.
        ValueError: If the scan returned no host key.
    """
    _cmd = ["ssh-keyscan"]
    if port:
        _cmd += ["-p", str(port)]
    _cmd.append(host)

    _keys = exec_command(_cmd, mode=Mode.STDERR_OS, deadline=deadline, verbose=verbose)
    if not _keys.strip():
        raise ValueError(f"no host key returned for {host}")

    _known_hosts = os.path.join(directory, KNOWN_HOSTS)
    with open(_known_hosts, "w") as f:
        f.write(_keys)

    return _known_hosts


def generate_deploy_key(directory: str) -> tuple[str, str]:
    """
    Generates a 2048 bit RSA keypair, without a passphrase, in <directory>.

    The private key is written in the OpenSSH format to `identity` (mode 0600), and the
    public key to `identity.pub`.

    Returns:
        tuple[str, str]: The private and public key paths.
    """
    _pkeypriv = os.path.join(directory, IDENTITY)
    _pkeypub = os.path.join(directory, IDENTITY_PUB)

    private_key = rsa.generate_private_key(public_exponent=_public_exponent, key_size=_key_size)
    public_key = private_key.public_key()

    # --- Save the Private Key ---
    with open(_pkeypriv, "wb") as f:
        f.write(private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.OpenSSH,
            encryption_algorithm=serialization.NoEncryption(),
        ))

    os.chmod(_pkeypriv, 0o600)

    # --- Save the Public Key ---
    with open(_pkeypub, "wb") as f:
        f.write(public_key.public_bytes(
            encoding=serialization.Encoding.OpenSSH,
            format=serialization.PublicFormat.OpenSSH,
        ) + b"\n")

    return _pkeypriv, _pkeypub


def read_public_key(path: str) -> str:
    with open(path, "r") as f:
        return f.read().strip()


def fingerprint(public_key: str) -> str:
    """Returns the SHA256 fingerprint of an OpenSSH public key, as printed by ssh-keygen -l."""
    _blob = base64.b64decode(public_key.split()[1])
    _digest = base64.b64encode(hashlib.sha256(_blob).digest()).decode("ascii").rstrip("=")
    return f"SHA256:{_digest}"
