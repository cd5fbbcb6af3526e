"""
URLconf import order. Each case starts a new interpreter so no module is
already cached by the test session.
"""
import os
import subprocess
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent

SCRIPT = """
import django
django.setup()
import {first}
from django.urls import resolve
print(resolve("/api/appointments/").func.__name__)
print(resolve("/api/accounts/users/").func.__name__)
"""


@pytest.mark.parametrize(
    "first",
    ["config.urls", "core.exceptions", "core.handlers", "accounts.authentication", "rest_framework.views"],
)
def test_urlconf_loads_in_a_fresh_interpreter(first):
    env = {**os.environ, "DJANGO_SETTINGS_MODULE": "config.settings"}
    result = subprocess.run(
        [sys.executable, "-c", SCRIPT.format(first=first)],
        cwd=ROOT,
        env=env,
        capture_output=True,
        text=True,
        timeout=120,
    )
    assert result.returncode == 0, result.stderr
    assert "AppointmentViewSet" in result.stdout
