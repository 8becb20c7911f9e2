"""
PostureProbe Error Taxonomy
State providers raise these; the check runner turns them into error findings.
"""

ERROR_GENERIC = 1
ERROR_NOT_FOUND = 2
ERROR_ACCESS_DENIED = 5
ERROR_TIMEOUT = 1460


class ProbeError(Exception):
    """Base error carrying the code reported in a finding's ErrorCode field."""

    code = ERROR_GENERIC

    def __init__(self, message: str, code: int = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class PrivilegeError(ProbeError):
    """The state source refused the query: the probe is not elevated."""

    code = ERROR_ACCESS_DENIED


class QueryError(ProbeError):
    """Any other failure while querying a state source."""


class NotFoundError(ProbeError):
    """An entity has no data for the query (e.g. no Parameters key). Never surfaced."""

    code = ERROR_NOT_FOUND
