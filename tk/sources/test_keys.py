import base64
import hashlib
import os
import stat
import pytest

from unittest.mock import patch
from cryptography.hazmat.primitives import serialization
from tk.shared.errors import CommandError
from tk.shared.exec import Mode
from tk.sources.keys import fingerprint, generate_deploy_key, read_public_key, scan_host_key


class TestGenerateDeployKey:

    def test_generate_deploy_key_writes_keypair(self, tmp_path):
        """Test that an unencrypted 2048 bit RSA keypair is written."""
        # Act
        private_path, public_path = generate_deploy_key(str(tmp_path))

        # Assert
        assert private_path == os.path.join(str(tmp_path), "identity")
        assert public_path == os.path.join(str(tmp_path), "identity.pub")

        with open(private_path, "rb") as f:
            private_key = serialization.load_ssh_private_key(f.read(), password=None)
        assert private_key.key_size == 2048

        public_key = read_public_key(public_path)
        assert public_key.startswith("ssh-rsa ")

    def test_generate_deploy_key_private_key_permissions(self, tmp_path):
        """Test that the private key is only readable by its owner."""
        private_path, _ = generate_deploy_key(str(tmp_path))

        assert stat.S_IMODE(os.stat(private_path).st_mode) == 0o600

    def test_generate_deploy_key_is_fresh(self, tmp_path):
        """Test that every call generates a new key."""
        first = tmp_path / "first"
        second = tmp_path / "second"
        first.mkdir()
        second.mkdir()

        _, first_pub = generate_deploy_key(str(first))
        _, second_pub = generate_deploy_key(str(second))

        assert read_public_key(first_pub) != read_public_key(second_pub)


class TestScanHostKey:

    @patch("tk.sources.keys.exec_command")
    def test_scan_host_key_writes_known_hosts(self, mock_exec, tmp_path):
        """Test that the scanned host keys are written to known_hosts."""
        mock_exec.return_value = "github.com ssh-rsa AAAAB3NzaC1yc2E\n"

        result = scan_host_key("github.com", str(tmp_path))

        assert result == os.path.join(str(tmp_path), "known_hosts")
        assert (tmp_path / "known_hosts").read_text() == "github.com ssh-rsa AAAAB3NzaC1yc2E\n"
        mock_exec.assert_called_once_with(["ssh-keyscan", "github.com"], mode=Mode.STDERR_OS, deadline=None, verbose=False)

    @patch("tk.sources.keys.exec_command")
    def test_scan_host_key_with_port(self, mock_exec, tmp_path):
        """Test that a custom port is passed to ssh-keyscan."""
        mock_exec.return_value = "[git.example.com]:2222 ssh-ed25519 AAAA\n"

        scan_host_key("git.example.com", str(tmp_path), port=2222)

        args, _ = mock_exec.call_args
        assert args[0] == ["ssh-keyscan", "-p", "2222", "git.example.com"]

    @patch("tk.sources.keys.exec_command")
    def test_scan_host_key_empty_result(self, mock_exec, tmp_path):
        """Test that a scan without any host key is an error."""
        mock_exec.return_value = "\n"

        with pytest.raises(ValueError):
            scan_host_key("github.com", str(tmp_path))

        assert not (tmp_path / "known_hosts").exists()

    @patch("tk.sources.keys.exec_command")
    def test_scan_host_key_command_failure(self, mock_exec, tmp_path):
        """Test that ssh-keyscan failures are propagated."""
        mock_exec.side_effect = CommandError("ssh-keyscan exited with status 1")

        with pytest.raises(CommandError):
            scan_host_key("github.com", str(tmp_path))


class TestFingerprint:

    def test_fingerprint_matches_ssh_keygen_format(self):
        """Test that the fingerprint is the unpadded base64 SHA256 of the key blob."""
        blob = b"\x00\x00\x00\x07ssh-rsa-test-blob"
        public_key = f"ssh-rsa {base64.b64encode(blob).decode()} comment"
        expected = base64.b64encode(hashlib.sha256(blob).digest()).decode().rstrip("=")

        assert fingerprint(public_key) == f"SHA256:{expected}"
