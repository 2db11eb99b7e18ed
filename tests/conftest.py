from __future__ import annotations

from typing import Iterator

import pytest

from inplace_engine.runtime import telemetry


@pytest.fixture(autouse=True)
def quiet_telemetry(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.setenv("INPLACE_ENGINE_DISABLE_CONSOLE", "1")
    monkeypatch.delenv("INPLACE_ENGINE_LOG_FILE", raising=False)
    telemetry.reset()
    yield
    telemetry.reset()
