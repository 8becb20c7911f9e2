# postureprobe/modules/service_checks.py
from functools import partial
from typing import List

from postureprobe.core.config import Config
from postureprobe.core.locations import LocationClassifier, binary_patterns, library_patterns
from postureprobe.core.runner import CheckDefinition, CheckOutcome
from postureprobe.core.scoring import score_locations
from postureprobe.core.state import StateProvider
from postureprobe.utils.logger import Logger

logger = Logger()


def check_service_locations(provider: StateProvider, classifier: LocationClassifier) -> CheckOutcome:
    """Flags services whose image path is outside the trusted installation trees."""
    anomalies = [
        service for service in provider.services()
        if classifier.is_anomalous(service.image_path, service.service_name)
    ]
    for service in anomalies:
        logger.warning(f"Service outside trusted locations: {service.service_name} -> {service.image_path}")
    return CheckOutcome(
        score=score_locations(anomalies),
        result_data=[s.model_dump(by_alias=True, mode="json") for s in anomalies],
    )


def check_service_dll_locations(provider: StateProvider, classifier: LocationClassifier) -> CheckOutcome:
    """Flags service libraries loaded from outside system32."""
    anomalies = [
        library for library in provider.service_libraries()
        if classifier.is_anomalous(library.library_path, library.service_name)
    ]
    for library in anomalies:
        logger.warning(f"Service DLL outside system32: {library.service_name} -> {library.library_path}")
    return CheckOutcome(
        score=score_locations(anomalies),
        result_data=[lib.model_dump(by_alias=True, mode="json") for lib in anomalies],
    )


def binary_classifier(config: Config) -> LocationClassifier:
    patterns = binary_patterns(config.system_root, config.program_files_dirs, config.program_data)
    return LocationClassifier(patterns, config.service_exceptions)


def library_classifier(config: Config) -> LocationClassifier:
    return LocationClassifier(library_patterns(config.system_root), config.library_exceptions)


def service_checks(config: Config) -> List[CheckDefinition]:
    return [
        CheckDefinition(
            name="ServiceLocations",
            display_name="Service Binary Locations",
            description="Lists services whose executable lives outside the Windows and Program Files trees.",
            risk_weight=100,
            run=partial(check_service_locations, classifier=binary_classifier(config)),
        ),
        CheckDefinition(
            name="ServiceDLLLocations",
            display_name="Service DLL Locations",
            description="Lists services whose ServiceDll parameter points outside System32.",
            risk_weight=90,
            run=partial(check_service_dll_locations, classifier=library_classifier(config)),
        ),
    ]
