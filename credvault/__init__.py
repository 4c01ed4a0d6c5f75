"""
CredVault Offline Credential Vault
Copyright (c) 2025

LEGAL NOTICE AND THREAT MODEL:
This tool is for personal use only. It keeps service credentials on the local
device, gated by a single master passphrase. Nothing is transmitted off the
device. The credential list is stored as plain structured data protected by
file permissions; only the master passphrase is hashed.
"""

from .config import APP_VERSION as __version__
