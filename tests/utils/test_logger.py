from __future__ import annotations

import pytest
from loguru import logger

from multitrend import logs


@pytest.fixture
def captured():
    messages = []
    sink_id = logger.add(lambda m: messages.append(str(m)), level="DEBUG")
    yield messages
    logger.remove(sink_id)


def test_catch_returns_result_and_logs_time(captured):
    @logs.catch()
    def add(a, b):
        return a + b

    assert add(2, 3) == 5
    assert any("[TIME] add took" in m for m in captured)


def test_catch_logs_and_reraises(captured):
    @logs.catch(msg="loader failed", log_time=False)
    def boom():
        raise KeyError("x")

    with pytest.raises(KeyError):
        boom()

    assert any("[ERROR] boom: loader failed" in m for m in captured)
    assert not any("[TIME]" in m for m in captured)
