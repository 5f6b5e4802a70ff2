import pytest
from pytest_mock import MockerFixture

from .fixtures import ScriptedRunner


@pytest.fixture
def runner(mocker: MockerFixture) -> ScriptedRunner:
    """Replace run_invocation so no process is ever spawned."""
    scripted = ScriptedRunner()
    mocker.patch("gitplumb.repository._transaction.run_invocation", new=scripted)
    return scripted
