# SPDX-License-Identifier: MIT
"""Release services.

Services coordinate the bundle domain (bundles/) with the external tools
(sf, gh, git) and produce the artifacts of a release run.
"""

from mkt.services.errors import ReleaseError, ReleaseErrorKind
from mkt.services.orchestrator import ReleaseSettings, RunReport, release_bundles

__all__ = [
    "ReleaseError",
    "ReleaseErrorKind",
    "ReleaseSettings",
    "RunReport",
    "release_bundles",
]
