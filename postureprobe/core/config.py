# postureprobe/core/config.py
from typing import Any, Dict, List, Optional
import yaml
import os
from dotenv import load_dotenv

DEFAULT_SERVICE_EXCEPTIONS = ["ATService", "ATBroker"]
DEFAULT_LIBRARY_EXCEPTIONS = ["AppXSvc", "ClipSVC", "LxssManager"]


class Config:
    """
    Loads configuration from environment variables (Priority 1) and 'config.yaml' (Priority 2).
    A .env file next to the project root or in the working directory is loaded first.
    """
    def __init__(self, config_path: str = "config.yaml") -> None:
        current_dir = os.path.dirname(os.path.abspath(__file__))
        project_root = os.path.abspath(os.path.join(current_dir, '..', '..'))
        env_path = os.path.join(project_root, '.env')

        if os.path.exists(env_path):
            load_dotenv(dotenv_path=env_path, override=True)
        else:
            load_dotenv(override=True)

        self.config_path = config_path
        self.data = self._load_yaml()

    def _load_yaml(self) -> Dict[str, Any]:
        if not os.path.exists(self.config_path):
            return {}
        try:
            with open(self.config_path, "r") as f:
                return yaml.safe_load(f) or {}
        except yaml.YAMLError:
            return {}

    def _section(self, name: str) -> Dict[str, Any]:
        section = self.data.get(name) if isinstance(self.data, dict) else None
        return section if isinstance(section, dict) else {}

    # --- LOGGING ---
    @property
    def log_level(self) -> str:
        return os.getenv("POSTUREPROBE_LOG_LEVEL", self._section("logging").get("level", "WARNING"))

    @property
    def log_file(self) -> Optional[str]:
        return os.getenv("POSTUREPROBE_LOG_FILE", self._section("logging").get("file")) or None

    # --- STATE QUERIES ---
    @property
    def powershell_timeout(self) -> int:
        raw = os.getenv("POSTUREPROBE_PS_TIMEOUT", self._section("powershell").get("timeout", 60))
        try:
            return int(raw)
        except (TypeError, ValueError):
            return 60

    # --- LOCATIONS ---
    @property
    def system_root(self) -> str:
        return os.getenv("SystemRoot", r"C:\Windows")

    @property
    def program_files_dirs(self) -> List[str]:
        return [
            os.getenv("ProgramFiles", r"C:\Program Files"),
            os.getenv("ProgramFiles(x86)", r"C:\Program Files (x86)"),
        ]

    @property
    def program_data(self) -> str:
        return os.getenv("ProgramData", r"C:\ProgramData")

    def _names(self, key: str, default: List[str]) -> List[str]:
        value = self._section("locations").get(key) or default
        if isinstance(value, str):
            value = [value]
        return [str(name) for name in value]

    @property
    def service_exceptions(self) -> List[str]:
        return self._names("service_exceptions", DEFAULT_SERVICE_EXCEPTIONS)

    @property
    def library_exceptions(self) -> List[str]:
        return self._names("library_exceptions", DEFAULT_LIBRARY_EXCEPTIONS)
