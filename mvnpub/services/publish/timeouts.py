from __future__ import annotations

# Local gpg operations (import, list-keys, --version)
GPG_TIMEOUT_SECONDS = 60.0

# Signing one bundle into the local staging directory
SIGN_TIMEOUT_SECONDS = 10 * 60.0

# Network-bound maven goals (deploy-file, deploy-staged-repository, rc-release).
# Closing a staging repository waits on remote rule evaluation.
MVN_NETWORK_TIMEOUT_SECONDS = 60 * 60.0
