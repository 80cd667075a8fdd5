"""
obds-to-fhir Utilities Package - Cross-Cutting Helpers

Session logging shared by the CLI and the mapping driver, forwarded through
``__all__`` to keep intra-package imports clean.
"""

from .logging import (
    setup_logging,
    get_logger,
    get_current_log_file,
    get_session_id,
    log_consolidation_summary,
    log_mapping_complete,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "get_current_log_file",
    "get_session_id",
    "log_consolidation_summary",
    "log_mapping_complete",
]
