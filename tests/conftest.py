import io

import pytest

from scripts.activation_log import ActivationLog


@pytest.fixture
def console():
    return io.StringIO()


@pytest.fixture
def log(tmp_path, console):
    activation_log = ActivationLog(
        tmp_path / "activation.log",
        console=console,
        fallback_path=tmp_path / "fallback.log",
    )
    yield activation_log
    activation_log.close()
