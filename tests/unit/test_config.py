import pytest
import yaml

from edgegrid_provider.config import ProviderConfig
from edgegrid_provider.errors import ConfigurationError
from edgegrid_provider.helpers import AUTH_FIXTURE


class TestProviderConfig:
    def test_from_params_ignores_module_options(self):
        params = dict(AUTH_FIXTURE, state="present", config_id=43253)

        config = ProviderConfig.from_params(params)

        assert config.api_url == "https://akab-host.luna.akamaiapis.net"
        assert config.timeout == 30
        assert config.account_switch_key is None

    def test_trailing_slash_is_removed(self):
        config = ProviderConfig(api_url="https://host.example.com/", access_token="t")

        assert config.api_url == "https://host.example.com"

    def test_token_is_hidden_from_repr(self):
        config = ProviderConfig(**AUTH_FIXTURE)

        assert AUTH_FIXTURE["access_token"] not in repr(config)

    @pytest.mark.parametrize(
        "overrides, field",
        [
            ({"api_url": "host.example.com"}, "api_url"),
            ({"timeout": 0}, "timeout"),
            ({"access_token": None}, "access_token"),
        ],
    )
    def test_invalid_settings_raise_configuration_error(self, overrides, field):
        params = dict(AUTH_FIXTURE, **overrides)

        with pytest.raises(ConfigurationError) as exc_info:
            ProviderConfig.from_params(params)

        assert exc_info.value.field == field

    def test_from_file(self, tmp_path):
        path = tmp_path / "edgegrid.yaml"
        path.write_text(
            yaml.safe_dump(
                {
                    "api_url": "https://akab-host.luna.akamaiapis.net",
                    "access_token": "token",
                    "account_switch_key": "1-ABCDE",
                }
            )
        )

        config = ProviderConfig.from_file(str(path))

        assert config.account_switch_key == "1-ABCDE"

    def test_from_file_missing(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            ProviderConfig.from_file(str(tmp_path / "missing.yaml"))

        assert exc_info.value.field == "config_file"

    def test_from_file_requires_mapping(self, tmp_path):
        path = tmp_path / "edgegrid.yaml"
        path.write_text("- just\n- a list\n")

        with pytest.raises(ConfigurationError):
            ProviderConfig.from_file(str(path))
