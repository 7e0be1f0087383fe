from __future__ import annotations

from pathlib import Path

import pytest

from providerci.config import Options

WIDGET_CONFIG = """\
provider: widget
lint: true
docker: false
"""

CLUSTER_CONFIG = """\
provider: kubernetes
major-version: 4
test-infrastructure: true
gcp: true
golangci-timeout: 30m
additional-branches:
  - v4
"""


@pytest.fixture()
def providers_dir(tmp_path: Path) -> Path:
    root = tmp_path / "providers"
    for name, content in {"widget": WIDGET_CONFIG, "kubernetes": CLUSTER_CONFIG}.items():
        (root / name).mkdir(parents=True)
        (root / name / "config.yaml").write_text(content, encoding="utf-8")
    return root


@pytest.fixture()
def widget_opts() -> Options:
    return Options(provider="widget", lint=True, docker=False)


@pytest.fixture()
def cluster_opts() -> Options:
    return Options(provider="kubernetes", lint=True, test_infrastructure=True, gcp=True)
