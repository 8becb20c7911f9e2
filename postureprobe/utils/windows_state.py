"""
Windows State Provider

Live implementation of the StateProvider contract.

Firewall and network queries go through the PowerShell NetSecurity and
NetConnection cmdlets, piped to ConvertTo-Json:
- Get-NetFirewallProfile -PolicyStore ActiveStore
- Get-NetConnectionProfile
- Get-NetFirewallRule -PolicyStore <store> (enabled, inbound, allow)
- Get-NetFirewallPortFilter / Get-NetFirewallApplicationFilter

Service registrations are read from the registry:
- HKEY_LOCAL_MACHINE\\SYSTEM\\CurrentControlSet\\Services\\<name>  (ImagePath)
- ...\\Services\\<name>\\Parameters  (ServiceDll)
"""
import json
import subprocess
from typing import Any, List, Optional, Set

try:
    import winreg
except ImportError:
    winreg = None

from postureprobe.core.errors import (
    ERROR_NOT_FOUND,
    ERROR_TIMEOUT,
    NotFoundError,
    PrivilegeError,
    QueryError,
)
from postureprobe.core.schemas import (
    FirewallProfile,
    FirewallProfileStatus,
    FirewallRule,
    PolicyStore,
    RuleFilter,
    ServiceLibraryRegistration,
    ServiceRegistration,
)
from postureprobe.core.state import StateProvider
from postureprobe.utils.logger import Logger

SERVICES_KEY = r"SYSTEM\CurrentControlSet\Services"

# powershell.exe writes the OEM code page unless told otherwise
UTF8_OUTPUT = "[Console]::OutputEncoding=[Text.Encoding]::UTF8; "

ACCESS_DENIED_MARKERS = ("access is denied", "access denied", "requires elevation", "0x80070005")

# NetConnectionProfile.NetworkCategory -> firewall profile
NETWORK_CATEGORIES = {
    "Public": "Public",
    "Private": "Private",
    "DomainAuthenticated": "Domain",
    0: "Public",
    1: "Private",
    2: "Domain",
}

PROFILE_SCRIPT = (
    "Get-NetFirewallProfile -PolicyStore ActiveStore | "
    "Select-Object Name, @{Name='Enabled';Expression={$_.Enabled.ToString()}}"
)

CONNECTION_SCRIPT = (
    "Get-NetConnectionProfile -ErrorAction SilentlyContinue | "
    "Select-Object Name, @{Name='NetworkCategory';Expression={$_.NetworkCategory.ToString()}}"
)

# An empty store is reported by the cmdlet as an ObjectNotFound error. Errors
# are collected: denied queries exit 5, anything else but ObjectNotFound exits 1.
RULES_SCRIPT = (
    "$rules = Get-NetFirewallRule -PolicyStore {store} -Enabled True -Direction Inbound -Action Allow "
    "-ErrorAction SilentlyContinue -ErrorVariable queryErrors; "
    "if ($queryErrors | Where-Object {{ $_.CategoryInfo.Category -eq 'PermissionDenied' }}) "
    "{{ [Console]::Error.WriteLine('Access is denied'); exit 5 }}; "
    "$failures = @($queryErrors | Where-Object {{ $_.CategoryInfo.Category -ne 'ObjectNotFound' }}); "
    "if ($failures.Count -gt 0) "
    "{{ $failures | ForEach-Object {{ [Console]::Error.WriteLine($_.ToString()) }}; exit 1 }}; "
    "$rules | Select-Object Name, DisplayName, Group, @{{Name='Profile';Expression={{[int]$_.Profile}}}}"
)

FILTER_SCRIPT = (
    "$r = Get-NetFirewallRule -PolicyStore ActiveStore -Name '{rule_id}'; "
    "$p = $r | Get-NetFirewallPortFilter; "
    "$a = $r | Get-NetFirewallApplicationFilter; "
    "[pscustomobject]@{{LocalPort=@($p.LocalPort); RemotePort=@($p.RemotePort); "
    "Protocol=[string]$p.Protocol; Program=[string]$a.Program}}"
)


def _ensure_list(data: Any) -> List[Any]:
    """PowerShell emits a bare object for single results and nothing for none."""
    if data is None:
        return []
    if isinstance(data, list):
        return data
    return [data]


def _as_bool(value: Any) -> bool:
    return value in (True, 1, "True", "true", "1")


def _as_ports(value: Any) -> tuple:
    return tuple(str(port) for port in _ensure_list(value) if port not in (None, ""))


def _ps_quote(value: str) -> str:
    return value.replace("'", "''")


class WindowsStateProvider(StateProvider):
    """Reads firewall, network and service state from a live Windows host."""

    def __init__(self, timeout: int = 60):
        self.timeout = timeout
        self.logger = Logger()

    # ------------------------------------------------------------------ #
    #  PowerShell                                                        #
    # ------------------------------------------------------------------ #

    def _run_ps(self, script: str) -> str:
        """Execute a PowerShell command and return stdout.

        Raises PrivilegeError when PowerShell reports access denied and
        QueryError on any other failure (missing binary, timeout, non-zero exit).
        """
        cmd = [
            "powershell.exe",
            "-NoProfile",
            "-NonInteractive",
            "-ExecutionPolicy", "Bypass",
            "-Command", UTF8_OUTPUT + script,
        ]
        self.logger.debug(f"PS> {script[:120]}{'...' if len(script) > 120 else ''}")
        try:
            proc = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            raise QueryError(f"PowerShell query timed out after {self.timeout}s", code=ERROR_TIMEOUT)
        except FileNotFoundError:
            raise QueryError("powershell.exe not found on PATH", code=ERROR_NOT_FOUND)

        stderr = (proc.stderr or "").strip()
        if any(marker in stderr.lower() for marker in ACCESS_DENIED_MARKERS):
            raise PrivilegeError(f"Access denied: {stderr[:200]}")
        if proc.returncode != 0:
            raise QueryError(f"PowerShell exited with {proc.returncode}: {stderr[:200]}")
        return (proc.stdout or "").strip()

    def _run_ps_json(self, script: str) -> List[Any]:
        raw = self._run_ps(f"{script} | ConvertTo-Json -Depth 3 -Compress")
        if not raw:
            return []
        try:
            return _ensure_list(json.loads(raw))
        except ValueError as e:
            raise QueryError(f"Malformed PowerShell output: {e}")

    def firewall_profiles(self) -> List[FirewallProfileStatus]:
        statuses = []
        for entry in self._run_ps_json(PROFILE_SCRIPT):
            try:
                profile = FirewallProfile(entry.get("Name"))
            except ValueError:
                self.logger.debug(f"Ignoring unknown firewall profile: {entry.get('Name')}")
                continue
            statuses.append(FirewallProfileStatus(profile_name=profile, enabled=_as_bool(entry.get("Enabled"))))
        return statuses

    def connected_categories(self) -> Set[str]:
        connected = set()
        for entry in self._run_ps_json(CONNECTION_SCRIPT):
            category = NETWORK_CATEGORIES.get(entry.get("NetworkCategory"))
            if category:
                connected.add(category)
        return connected

    def firewall_rules(self, store: PolicyStore) -> List[FirewallRule]:
        rules = []
        for entry in self._run_ps_json(RULES_SCRIPT.format(store=store.value)):
            rules.append(FirewallRule(
                rule_id=entry.get("Name") or "",
                display_name=entry.get("DisplayName") or "",
                group=entry.get("Group") or None,
                profile_mask=int(entry.get("Profile") or 0),
                source_store=store,
            ))
        self.logger.debug(f"{store.value}: {len(rules)} inbound allow rules")
        return rules

    def rule_filter(self, rule: FirewallRule) -> RuleFilter:
        entries = self._run_ps_json(FILTER_SCRIPT.format(rule_id=_ps_quote(rule.rule_id)))
        if not entries:
            return RuleFilter()
        entry = entries[0]
        return RuleFilter(
            local_ports=_as_ports(entry.get("LocalPort")),
            remote_ports=_as_ports(entry.get("RemotePort")),
            protocol=entry.get("Protocol") or "Any",
            application_path=entry.get("Program") or None,
        )

    # ------------------------------------------------------------------ #
    #  Registry                                                          #
    # ------------------------------------------------------------------ #

    def _require_registry(self) -> None:
        if winreg is None:
            raise QueryError("Registry access requires Windows", code=ERROR_NOT_FOUND)

    def _open_key(self, parent, subkey: str):
        try:
            return winreg.OpenKey(parent, subkey, 0, winreg.KEY_READ)
        except FileNotFoundError:
            raise NotFoundError(f"Registry key not found: {subkey}")
        except PermissionError:
            raise PrivilegeError(f"Access denied opening registry key: {subkey}")
        except OSError as e:
            raise QueryError(f"Registry query failed for {subkey}: {e}")

    def _read_value(self, key, value_name: str) -> str:
        """Reads a string value, expanding REG_EXPAND_SZ data."""
        try:
            value, value_type = winreg.QueryValueEx(key, value_name)
        except FileNotFoundError:
            raise NotFoundError(f"Registry value not found: {value_name}")
        except PermissionError:
            raise PrivilegeError(f"Access denied reading registry value: {value_name}")
        if value_type == winreg.REG_EXPAND_SZ:
            value = winreg.ExpandEnvironmentStrings(value)
        return str(value).strip()

    def _service_names(self) -> List[str]:
        self._require_registry()
        names = []
        try:
            services_key = self._open_key(winreg.HKEY_LOCAL_MACHINE, SERVICES_KEY)
        except NotFoundError as e:
            raise QueryError(e.message)
        with services_key:
            i = 0
            while True:
                try:
                    names.append(winreg.EnumKey(services_key, i))
                    i += 1
                except OSError:
                    break
        return names

    def _service_value(self, subkey: str, value_name: str) -> Optional[str]:
        """Value under Services\\<subkey>, or None when the key or value is absent."""
        self._require_registry()
        try:
            with self._open_key(winreg.HKEY_LOCAL_MACHINE, f"{SERVICES_KEY}\\{subkey}") as key:
                return self._read_value(key, value_name) or None
        except NotFoundError:
            return None

    def services(self) -> List[ServiceRegistration]:
        registrations = []
        for name in self._service_names():
            image_path = self._service_value(name, "ImagePath")
            if image_path:
                registrations.append(ServiceRegistration(service_name=name, image_path=image_path))
        self.logger.debug(f"Services with ImagePath: {len(registrations)}")
        return registrations

    def service_libraries(self) -> List[ServiceLibraryRegistration]:
        registrations = []
        for name in self._service_names():
            library_path = self._service_value(f"{name}\\Parameters", "ServiceDll")
            if library_path:
                registrations.append(ServiceLibraryRegistration(service_name=name, library_path=library_path))
        self.logger.debug(f"Services with ServiceDll: {len(registrations)}")
        return registrations
