from unittest.mock import MagicMock, patch
import pytest

from edgegrid_provider.context import ProviderContext
from edgegrid_provider.helpers import AUTH_FIXTURE

from fakes import (
    FakeAppSecClient,
    FakeIAMClient,
    FakeNetworkListsClient,
    FakePapiClient,
)


@pytest.fixture
def mock_ansible_module():
    """
    A pytest fixture that provides a mocked AnsibleModule instance for each test.
    This prevents tests from interfering with each other and from exiting the test runner.
    """
    # We patch 'AnsibleModule' in the runner's namespace to avoid import issues.
    with patch("edgegrid_provider.interfaces.runner.AnsibleModule") as mock_class:
        mock_module = mock_class.return_value
        mock_module.params = dict(AUTH_FIXTURE)
        mock_module.check_mode = False

        # Mock the exit methods to prevent sys.exit and to capture their arguments
        mock_module.exit_json = MagicMock()
        mock_module.fail_json = MagicMock()
        mock_module.warn = MagicMock()

        yield mock_module


@pytest.fixture
def appsec():
    client = FakeAppSecClient()
    yield client
    client.assert_expectations()


@pytest.fixture
def iam():
    client = FakeIAMClient()
    yield client
    client.assert_expectations()


@pytest.fixture
def networklists():
    client = FakeNetworkListsClient()
    yield client
    client.assert_expectations()


@pytest.fixture
def papi():
    client = FakePapiClient()
    yield client
    client.assert_expectations()


@pytest.fixture
def context(appsec, iam, networklists, papi):
    return ProviderContext(
        appsec=appsec, iam=iam, networklists=networklists, papi=papi
    )
