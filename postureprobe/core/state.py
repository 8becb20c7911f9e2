"""
State Provider Contract

Read-only queries the checks run against live operating-system state.
Implementations raise PrivilegeError when the source refuses access and
QueryError for any other failure; per-entity gaps (a service without a
Parameters key) are skipped inside the provider, never raised.
"""
from abc import ABC, abstractmethod
from typing import List, Set

from postureprobe.core.schemas import (
    FirewallProfileStatus,
    FirewallRule,
    PolicyStore,
    RuleFilter,
    ServiceLibraryRegistration,
    ServiceRegistration,
)


class StateProvider(ABC):

    @abstractmethod
    def firewall_profiles(self) -> List[FirewallProfileStatus]:
        """Enabled flag for each of the Domain, Private and Public profiles.

        ``network_connected`` is left False here; the firewall state check
        fills it from :meth:`connected_categories`.
        """

    @abstractmethod
    def connected_categories(self) -> Set[str]:
        """Profile names ("Domain", "Private", "Public") with at least one active connection."""

    @abstractmethod
    def firewall_rules(self, store: PolicyStore) -> List[FirewallRule]:
        """Enabled inbound allow rules of one policy store, in store order, without filter detail."""

    @abstractmethod
    def rule_filter(self, rule: FirewallRule) -> RuleFilter:
        """Port, protocol and program filter of one active rule."""

    @abstractmethod
    def services(self) -> List[ServiceRegistration]:
        """Every service key that declares an image path."""

    @abstractmethod
    def service_libraries(self) -> List[ServiceLibraryRegistration]:
        """Every service whose Parameters key declares a service library."""
