import configparser
import os
from dataclasses import dataclass


class MetaData:
    _name = "tk"
    _env_prefix: str = "TK_"
    _section: str = "defaults"
    _fallbacks: dict = {
        "namespace": "gitops-system",
        "interval": "1m",
        "timeout": "5m",
        "kubeconfig": "",
    }

    def __init__(self):
        self.config_path: str = (
            self._config_path()
        )  # The folder holding the bundled config.ini
        self.config_file: str = (
            self._config_file()
        )  # The path to the config file (config.ini)
        self.config_data: configparser.ConfigParser = (
            self._config_data()
        )  # The parsed config file (config.ini)

        self.namespace: str = self.get("namespace")
        self.interval: str = self.get("interval")
        self.timeout: str = self.get("timeout")
        self.kubeconfig: str = os.path.expanduser(self.get("kubeconfig"))

    def __str__(self) -> str:
        """Returns the string representation of the MetaData class."""
        return f"MetaData --> <{self._name}>"

    def _config_path(self) -> str:
        """Returns the path to the config file directory."""
        return os.path.abspath(os.path.dirname(__file__))

    def _config_file(self) -> str:
        """Returns the path to the config file."""
        return os.path.join(self.config_path, "config.ini")

    def _config_data(self) -> configparser.ConfigParser:
        """Returns the config data from the config file."""
        data = configparser.ConfigParser()
        data.read(self.config_file)
        return data

    def get(self, key: str) -> str:
        """Returns a default value, environment first, then config.ini, then the built-in fallback.

        Args:
            key (str): The option name, i.e. namespace -- read from TK_NAMESPACE.
        """
        _env_value = os.environ.get(f"{self._env_prefix}{key.upper()}", "").strip()
        if _env_value:
            return _env_value

        return self.config_data.get(self._section, key, fallback=self._fallbacks.get(key))


@dataclass
class Settings:
    """Process-wide options resolved for a single invocation."""

    namespace: str = "gitops-system"
    timeout: float = 300.0  # seconds
    verbose: bool = False
    kubeconfig: str | None = None
    interval: str = "1m"
