"""
PostureProbe Entry Point
Runs the requested posture checks and prints the JSON report.
"""
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from postureprobe.probe import main

if __name__ == "__main__":
    sys.exit(main())
