"""Tests for wiring the credential graph from Settings."""

from appcreds.core.config import Settings
from appcreds.main import create_credentials


def test_package_imports():
    """Verify all submodules can be imported without errors."""
    import appcreds
    import appcreds.github
    import appcreds.secrets

    assert appcreds.create_credentials is create_credentials


class TestCreateCredentials:
    def test_without_doppler_token_is_env_only(self):
        credentials = create_credentials(
            Settings(_env_file=None, doppler_token=""),
            configure_logging=False,
        )

        assert credentials.doppler_client is None
        assert [s.name for s in credentials.resolver.strategies] == ["env"]

    async def test_with_doppler_token_puts_vault_first(self):
        credentials = create_credentials(
            Settings(_env_file=None, doppler_token="dp.st.token"),
            configure_logging=False,
        )

        async with credentials:
            assert credentials.doppler_client is not None
            assert [s.name for s in credentials.resolver.strategies] == ["vault", "env"]

    async def test_resolves_from_injected_environ(self, observer):
        credentials = create_credentials(
            Settings(_env_file=None, doppler_token=""),
            observer=observer,
            environ={"GITHUB_APP_ID": "123456"},
            configure_logging=False,
        )

        assert await credentials.secrets.app_id() == "123456"

    def test_configures_logging_by_default(self):
        credentials = create_credentials(Settings(_env_file=None, doppler_token="", debug=False))

        assert credentials.exchanger is not None
