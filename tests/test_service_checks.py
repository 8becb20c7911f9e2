# tests/test_service_checks.py
from conftest import FakeStateProvider
from postureprobe.core.schemas import ServiceLibraryRegistration, ServiceRegistration
from postureprobe.modules.service_checks import (
    binary_classifier,
    check_service_dll_locations,
    check_service_locations,
    library_classifier,
    service_checks,
)


def test_service_outside_trusted_tree_is_flagged(config):
    provider = FakeStateProvider(services=[
        ServiceRegistration(service_name="Foo", image_path=r"C:\Users\Public\evil.exe"),
        ServiceRegistration(service_name="Dnscache", image_path=r"C:\WINDOWS\system32\svchost.exe -k NetworkService"),
    ])
    outcome = check_service_locations(provider, binary_classifier(config))
    assert outcome.score == 1
    assert outcome.result_data == [{"ServiceName": "Foo", "ImagePath": r"C:\Users\Public\evil.exe"}]


def test_clean_services_score_ten(config):
    provider = FakeStateProvider(services=[
        ServiceRegistration(service_name="Dnscache", image_path=r"C:\WINDOWS\system32\svchost.exe"),
    ])
    outcome = check_service_locations(provider, binary_classifier(config))
    assert outcome.score == 10
    assert outcome.result_data == []


def test_service_exception_names_are_skipped(config):
    provider = FakeStateProvider(services=[
        ServiceRegistration(service_name="ATService", image_path=r"C:\Odd\place\at.exe"),
    ])
    assert check_service_locations(provider, binary_classifier(config)).score == 10


def test_service_dll_outside_system32_is_flagged(config):
    provider = FakeStateProvider(libraries=[
        ServiceLibraryRegistration(service_name="wuauserv", library_path=r"C:\Windows\system32\wuaueng.dll"),
        ServiceLibraryRegistration(service_name="Backdoor", library_path=r"C:\Windows\Temp\bd.dll"),
        ServiceLibraryRegistration(service_name="LxssManager", library_path=r"C:\Windows\lxss\LxssManager.dll"),
    ])
    outcome = check_service_dll_locations(provider, library_classifier(config))
    assert outcome.score == 1
    assert [d["ServiceName"] for d in outcome.result_data] == ["Backdoor"]
    assert outcome.result_data[0]["LibraryPath"] == r"C:\Windows\Temp\bd.dll"


def test_service_dll_program_files_is_not_trusted(config):
    provider = FakeStateProvider(libraries=[
        ServiceLibraryRegistration(service_name="Vendor", library_path=r"C:\Program Files\Vendor\svc.dll"),
    ])
    assert check_service_dll_locations(provider, library_classifier(config)).score == 1


def test_exception_lists_come_from_config(tmp_path, monkeypatch):
    from postureprobe.core.config import Config

    monkeypatch.chdir(tmp_path)
    (tmp_path / "config.yaml").write_text(
        "locations:\n  service_exceptions:\n    - Foo\n", encoding="utf-8"
    )
    classifier = binary_classifier(Config(config_path=str(tmp_path / "config.yaml")))
    assert not classifier.is_anomalous(r"C:\Users\Public\evil.exe", "Foo")
    assert classifier.is_anomalous(r"C:\Users\Public\evil.exe", "ATService")


def test_service_check_definitions(config):
    checks = service_checks(config)
    assert [(c.name, c.risk_weight) for c in checks] == [
        ("ServiceLocations", 100),
        ("ServiceDLLLocations", 90),
    ]
