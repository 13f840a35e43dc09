"""Shared test fixtures and configuration."""

import os
import sys
from pathlib import Path

# Add nac_copilot/ to Python path so `from copilot.xxx` imports work
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "nac_copilot"))

import pytest

from copilot.annotations.overlay import OverlayManager
from copilot.annotations.surface import TextBufferSurface

os.environ["COPILOT_DEV_MODE"] = "true"

DEVICES_YAML = """\
devices:
  - name: sw1
    type: switch
  - name: sw2
  - type: x
"""


@pytest.fixture
def devices_yaml() -> str:
    return DEVICES_YAML


@pytest.fixture
def surface(devices_yaml: str) -> TextBufferSurface:
    return TextBufferSurface(devices_yaml)


@pytest.fixture
def overlay(surface: TextBufferSurface) -> OverlayManager:
    return OverlayManager(surface)


@pytest.fixture
def vars_file(tmp_path: Path, devices_yaml: str) -> Path:
    path = tmp_path / "site_vars.yml"
    path.write_text(devices_yaml)
    return path
