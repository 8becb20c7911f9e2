"""
PostureProbe - Security Posture Inventory Probe
Runs a fixed set of posture checks against live Windows state and emits
scored findings for a monitoring backend.
"""
__version__ = "1.0.0"
