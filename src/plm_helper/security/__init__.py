"""
Sensitive data scanning.

See :mod:`plm_helper.security.scanner` for the pattern list and scanning
functions.
"""

from .scanner import ScanResult, scan_directory, scan_file, scan_paths, summarize  # noqa: F401
