import pytest

from unittest.mock import patch
from tk.config import Settings
from tk.shared.errors import ApplyError, CommandError
from tk.shared.exec import Mode
from tk.sources.apply import apply_source, wait_for_source


class TestApplySource:

    @patch("tk.sources.apply.apply_manifest")
    def test_apply_source_success(self, mock_apply):
        """Test that the manifest is handed to kubectl apply."""
        settings = Settings(namespace="gitops-system")

        apply_source(settings, "---\nkind: GitRepository\n")

        mock_apply.assert_called_once_with(settings, "---\nkind: GitRepository\n", deadline=None)

    @patch("tk.sources.apply.apply_manifest")
    def test_apply_source_failure(self, mock_apply):
        """Test that a kubectl apply failure is reported as source apply failed."""
        mock_apply.side_effect = CommandError("kubectl exited with status 1")

        with pytest.raises(ApplyError, match="source apply failed"):
            apply_source(Settings(namespace="gitops-system"), "---\n")


class TestWaitForSource:

    @patch("tk.sources.apply._applyspinner")
    @patch("tk.sources.apply.exec_command")
    def test_wait_for_source_ready(self, mock_exec, mock_spinner):
        """Test that the source is waited on with the fixed one minute timeout."""
        # Arrange
        settings = Settings(namespace="flux")

        # Act
        wait_for_source(settings, "podinfo")

        # Assert
        mock_exec.assert_called_once_with(
            [
                "kubectl", "-n", "flux", "wait", "gitrepository/podinfo",
                "--for=condition=ready", "--timeout=1m",
            ],
            mode=Mode.CAPTURE,
            deadline=None,
            verbose=False,
        )
        mock_spinner.start.assert_called_once_with("waiting for source sync")
        mock_spinner.succeed.assert_called_once_with("source podinfo is ready")
        mock_spinner.fail.assert_not_called()

    @patch("tk.sources.apply._applyspinner")
    @patch("tk.sources.apply.exec_command")
    def test_wait_for_source_timeout(self, mock_exec, mock_spinner):
        """Test that a source which never becomes ready fails the sync."""
        mock_exec.side_effect = CommandError(
            "kubectl exited with status 1",
            returncode=1,
            stderr="error: timed out waiting for the condition on gitrepositories/podinfo\n",
        )

        with pytest.raises(ApplyError, match="source sync failed"):
            wait_for_source(Settings(namespace="flux"), "podinfo")

        mock_spinner.fail.assert_called_once_with("error: timed out waiting for the condition on gitrepositories/podinfo")
        mock_spinner.succeed.assert_not_called()

    @patch("tk.sources.apply._applyspinner")
    @patch("tk.sources.apply.exec_command")
    def test_wait_for_source_uses_kubeconfig(self, mock_exec, mock_spinner):
        """Test that the configured kubeconfig is used for the wait."""
        wait_for_source(Settings(namespace="flux", kubeconfig="/tmp/kubeconfig"), "podinfo")

        args, _ = mock_exec.call_args
        assert args[0][:3] == ["kubectl", "--kubeconfig", "/tmp/kubeconfig"]
