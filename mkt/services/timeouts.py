from __future__ import annotations

# gh API / release operations
GH_TIMEOUT_SECONDS = 60.0
GH_UPLOAD_TIMEOUT_SECONDS = 10 * 60.0

# Retry policy for idempotent gh calls (views, clobbering uploads)
GH_RETRY_ATTEMPTS = 3
GH_RETRY_DELAY_SECONDS = 1.0

# Packaging tool invocations run without a limit: a hang blocks the run.
PACKAGING_TIMEOUT_SECONDS: float | None = None
