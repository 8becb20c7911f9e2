"""
Trusted Installation Location Classifier

Flags service binaries and service libraries that live outside the
allow-listed Windows installation trees. Each trusted location is one
entry of a pattern table, compiled once and anchored at the start of the
path. Every pattern tolerates a leading quote and the ``\\??\\`` NT device
prefix, and matching is case-insensitive like the Windows file system.
"""
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

# Optional quote, then optional \??\ device prefix
PATH_PREFIX = r'^"?(?:\\\?\?\\)?'


@dataclass(frozen=True)
class LocationPattern:
    name: str
    meaning: str
    regex: re.Pattern

    def matches(self, path: str) -> bool:
        return self.regex.match(path) is not None


def _compile(name: str, meaning: str, body: str) -> LocationPattern:
    return LocationPattern(name, meaning, re.compile(PATH_PREFIX + body, re.IGNORECASE))


def _dir(path: str) -> str:
    return re.escape(path.rstrip("\\"))


def _system_root_alternatives(system_root: str) -> str:
    """The configured root plus the forms the service control manager stores."""
    forms = [_dir(system_root), r'\\SystemRoot', r'%SystemRoot%', r'%windir%']
    return "(?:" + "|".join(forms) + ")"


def binary_patterns(system_root: str, program_files: Sequence[str], program_data: str) -> List[LocationPattern]:
    """Allow table for service image paths."""
    root = _system_root_alternatives(system_root)
    table = [
        _compile("system_root_files", "file directly in the system root",
                 root + r'\\[^\\"]+?\.(?:exe|sys|dll)\b'),
        _compile("kernel_relative_system32", "driver path relative to the system root",
                 r'System32\\'),
        _compile("system32", "system32 subtree", root + r'\\System32\\'),
        _compile("syswow64", "syswow64 subtree", root + r'\\SysWOW64\\'),
        _compile("servicing", "servicing subtree", root + r'\\servicing\\'),
        _compile("dotnet", ".NET framework tree", root + r'\\Microsoft\.NET\\'),
        _compile("defender", "Defender data tree",
                 _dir(program_data) + r'\\Microsoft\\Windows Defender\\'),
    ]
    for index, directory in enumerate(program_files):
        table.append(_compile(f"program_files_{index}", "Program Files tree", _dir(directory) + r'\\'))
    return table


def library_patterns(system_root: str) -> List[LocationPattern]:
    """Allow table for service libraries: the system32 tree only."""
    root = _system_root_alternatives(system_root)
    return [
        _compile("system32", "system32 subtree", root + r'\\System32\\'),
        _compile("kernel_relative_system32", "library path relative to the system root", r'System32\\'),
    ]


class LocationClassifier:
    """Binds one pattern table and one exception list."""

    def __init__(self, allow_patterns: Iterable[LocationPattern], name_exceptions: Iterable[str]):
        self.allow_patterns = list(allow_patterns)
        self.name_exceptions = frozenset(name.casefold() for name in name_exceptions)

    def matching_pattern(self, path: str) -> Optional[LocationPattern]:
        for pattern in self.allow_patterns:
            if pattern.matches(path):
                return pattern
        return None

    def is_excepted(self, name: str) -> bool:
        return name.casefold() in self.name_exceptions

    def is_anomalous(self, path: str, name: str) -> bool:
        if self.is_excepted(name):
            return False
        return self.matching_pattern(path) is None
