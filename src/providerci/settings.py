from __future__ import annotations
import os

PROVIDERS_DIR = os.environ.get("PROVIDERCI_PROVIDERS_DIR", "providers")
CONFIG_FILE = os.environ.get("PROVIDERCI_CONFIG_FILE", "config.yaml")
