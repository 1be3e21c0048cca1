from __future__ import annotations

# GH / API operations
GH_TIMEOUT_SECONDS = 60.0

# balena REST API reads
BALENA_API_TIMEOUT_SECONDS = 30.0

# `balena push` runs the whole remote build; the CI job timeout bounds it.
BALENA_PUSH_TIMEOUT_SECONDS: float | None = None
BALENA_CLI_TIMEOUT_SECONDS = 2 * 60.0

# Local git operations (checkout)
GIT_TIMEOUT_SECONDS = 30.0

# Network-bound git operations (fetch)
GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0

# Idempotent read retry policy (gh api, balena API)
READ_RETRY_ATTEMPTS = 3
READ_RETRY_DELAY_SECONDS = 1.0

# Versionbot pushes its branch asynchronously after the pull request opens.
VERSIONBOT_BRANCH_ATTEMPTS = 10
VERSIONBOT_BRANCH_DELAY_SECONDS = 6.0
