from typing import List

from postureprobe.core.config import Config
from postureprobe.core.runner import CheckDefinition
from postureprobe.modules.firewall_checks import FIREWALL_STATE, OPEN_FIREWALL_PORTS
from postureprobe.modules.service_checks import service_checks


def build_checks(config: Config) -> List[CheckDefinition]:
    """All checks in declared (report) order."""
    return [FIREWALL_STATE, OPEN_FIREWALL_PORTS] + service_checks(config)
