"""
PostureProbe Entry Point

Usage: run_probe.py [CHECK ...]
No arguments (or "all") runs every check; otherwise only the named checks
run and unknown names are ignored. The report is the only thing written
to stdout.
"""
import sys
from typing import List, Optional

from postureprobe.core.config import Config
from postureprobe.core.errors import ERROR_ACCESS_DENIED
from postureprobe.core.runner import ELEVATION_HINT, CheckRunner
from postureprobe.core.schemas import Report
from postureprobe.core.state import StateProvider
from postureprobe.modules import build_checks
from postureprobe.utils.logger import Logger
from postureprobe.utils.windows_state import WindowsStateProvider


def run_probe(requested: List[str], config: Config, provider: Optional[StateProvider] = None) -> Report:
    logger = Logger()
    provider = provider or WindowsStateProvider(timeout=config.powershell_timeout)
    runner = CheckRunner(provider, build_checks(config))
    report = runner.run(requested)

    denied = [f.name for f in report if f.error_code == ERROR_ACCESS_DENIED]
    if denied:
        logger.warning(f"{ELEVATION_HINT} Affected checks: {', '.join(denied)}")
    return report


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    config = Config()
    Logger().configure(config.log_level, config.log_file)

    report = run_probe(args, config)
    sys.stdout.write(report.to_json() + "\n")
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())
