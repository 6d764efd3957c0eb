import contextlib

import pytest
from loguru import logger


@pytest.fixture
def log_records():  # type: ignore[no-untyped-def]
    records: list[dict] = []
    logger.enable("homelink")
    handler_id = logger.add(lambda message: records.append(message.record), level="TRACE")
    yield records
    with contextlib.suppress(ValueError):
        logger.remove(handler_id)
