"""
PostureProbe Data Contracts
Defines the strict structure of state snapshots and findings shared across modules.
JSON keys are PascalCase for the monitoring backend.
"""
from enum import Enum, IntFlag
from typing import Any, Dict, Iterator, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, RootModel, computed_field
from pydantic.alias_generators import to_pascal


class ProbeModel(BaseModel):
    """Immutable base: PascalCase aliases, construction by field name."""

    model_config = ConfigDict(frozen=True, alias_generator=to_pascal, populate_by_name=True)


class FirewallProfile(str, Enum):
    DOMAIN = "Domain"
    PRIVATE = "Private"
    PUBLIC = "Public"


class ProfileMask(IntFlag):
    """Firewall profile bitmask as reported by the rule store."""
    DOMAIN = 1
    PRIVATE = 2
    PUBLIC = 4


class PolicyStore(str, Enum):
    ACTIVE = "ActiveStore"
    SYSTEM_DEFAULTS = "SystemDefaults"
    STATIC_SERVICE = "StaticServiceStore"


class FirewallProfileStatus(ProbeModel):
    profile_name: FirewallProfile
    enabled: bool
    network_connected: bool = False


class RuleFilter(ProbeModel):
    """Port and application filter detail attached to one rule."""
    local_ports: Tuple[str, ...] = ()
    remote_ports: Tuple[str, ...] = ()
    protocol: str = "Any"
    application_path: Optional[str] = None


class FirewallRule(ProbeModel):
    rule_id: str
    display_name: str = ""
    application_path: Optional[str] = None
    local_ports: Tuple[str, ...] = ()
    remote_ports: Tuple[str, ...] = ()
    protocol: str = "Any"
    group: Optional[str] = None
    profile_mask: int = 0
    source_store: PolicyStore = PolicyStore.ACTIVE

    @computed_field(alias="Profiles")
    @property
    def profiles(self) -> List[str]:
        """Profile names covered by the bitmask, in Domain/Private/Public order."""
        mask = ProfileMask(self.profile_mask & 0b111)
        return [flag.name.title() for flag in ProfileMask if flag in mask]

    def with_filter(self, rule_filter: RuleFilter) -> "FirewallRule":
        """Returns a copy of the rule enriched with its filter detail."""
        return self.model_copy(update={
            "local_ports": rule_filter.local_ports,
            "remote_ports": rule_filter.remote_ports,
            "protocol": rule_filter.protocol,
            "application_path": rule_filter.application_path,
        })


class ServiceRegistration(ProbeModel):
    service_name: str
    image_path: str


class ServiceLibraryRegistration(ProbeModel):
    service_name: str
    library_path: str


class Finding(ProbeModel):
    """Normalized, scored result of one check. Field order is the wire order."""
    name: str
    display_name: str
    description: str
    score: Optional[int] = Field(None, ge=0, le=10)
    result_data: Optional[List[Dict[str, Any]]] = None
    risk_score: int = Field(ge=0, le=100)
    error_code: Optional[int] = None
    error_message: Optional[str] = None


class Report(RootModel[List[Finding]]):
    """Ordered findings for one probe invocation."""

    model_config = ConfigDict(frozen=True)

    def __iter__(self) -> Iterator[Finding]:
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    def __getitem__(self, index: int) -> Finding:
        return self.root[index]

    @property
    def names(self) -> List[str]:
        return [finding.name for finding in self.root]

    def to_json(self) -> str:
        """Compact JSON array, PascalCase keys, nulls kept."""
        return self.model_dump_json(by_alias=True)
