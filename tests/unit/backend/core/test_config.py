"""
Unit Tests for Configuration Management.

Black box tests against the public interface of config.py.
Tests run against the real YAML files in config/settings/.
Failure scenarios use tmp_path to create controlled filesystems.
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from second_brain.backend.core.config import (
    AppConfig,
    Settings,
    find_project_root,
    get_app_config,
    get_database_url,
    get_search_url,
    get_server_base_url,
    get_settings,
    load_yaml_config,
    validate_project_root,
)
from second_brain.backend.core.config_schema import (
    ClientSchema,
    DatabaseSchema,
    FeaturesSchema,
    SearchSchema,
)


@pytest.fixture(autouse=True)
def _clear_config_cache():
    """Clear lru_cache between tests so each test gets a fresh load."""
    get_settings.cache_clear()
    get_app_config.cache_clear()
    yield
    get_settings.cache_clear()
    get_app_config.cache_clear()


def _write_settings(root, files: dict[str, str]) -> None:
    (root / ".project_root").touch()
    settings_dir = root / "config" / "settings"
    settings_dir.mkdir(parents=True)
    for name, body in files.items():
        (settings_dir / name).write_text(body)


# =============================================================================
# Project root and YAML loading
# =============================================================================


class TestFindProjectRoot:
    def test_finds_root_from_project_directory(self):
        root = find_project_root()
        assert (root / ".project_root").exists()
        assert (root / "config" / "settings").is_dir()

    def test_raises_when_no_marker_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with pytest.raises(RuntimeError, match="Project root not found"):
            find_project_root()

    def test_validate_exits_when_marker_missing(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with pytest.raises(SystemExit):
            validate_project_root()


class TestLoadYamlConfig:
    def test_loads_all_config_files(self):
        """Every expected YAML file should be loadable."""
        for filename in [
            "application.yaml",
            "database.yaml",
            "logging.yaml",
            "features.yaml",
            "search.yaml",
            "storage.yaml",
            "client.yaml",
        ]:
            data = load_yaml_config(filename)
            assert isinstance(data, dict), f"{filename} did not return a dict"
            assert data, f"{filename} returned empty dict"

    def test_raises_for_nonexistent_file(self):
        with pytest.raises(FileNotFoundError, match="Configuration file not found"):
            load_yaml_config("does_not_exist.yaml")

    def test_returns_empty_dict_for_empty_yaml(self, tmp_path, monkeypatch):
        _write_settings(tmp_path, {"empty.yaml": ""})
        monkeypatch.chdir(tmp_path)

        assert load_yaml_config("empty.yaml") == {}


# =============================================================================
# Settings (secrets)
# =============================================================================


class TestSettings:
    def test_reads_secrets_from_environment(self, monkeypatch):
        monkeypatch.setenv("SEARCH_API_KEY", "xyz")
        monkeypatch.setenv("CLOUDINARY_CLOUD_NAME", "demo")

        settings = Settings(_env_file=None)

        assert settings.search_api_key == "xyz"
        assert settings.cloudinary_cloud_name == "demo"
        assert settings.db_password == ""

    def test_search_api_key_is_required(self, monkeypatch):
        monkeypatch.delenv("SEARCH_API_KEY", raising=False)
        with pytest.raises(PydanticValidationError):
            Settings(_env_file=None)


# =============================================================================
# AppConfig
# =============================================================================


class TestAppConfig:
    def test_sections_are_typed(self):
        config = AppConfig()
        assert isinstance(config.database, DatabaseSchema)
        assert isinstance(config.features, FeaturesSchema)
        assert isinstance(config.search, SearchSchema)
        assert isinstance(config.client, ClientSchema)

    def test_client_defaults(self):
        client = AppConfig().client
        assert client.fallback_layout.x == 400
        assert client.fallback_layout.y == 350
        assert client.fallback_layout.step == 60
        assert client.default_edge_style.stroke_width == 2

    def test_storage_folder(self):
        assert AppConfig().storage.folder == "second-brain-notes"

    def test_get_app_config_is_cached(self):
        assert get_app_config() is get_app_config()

    def test_unknown_key_is_rejected(self, tmp_path, monkeypatch):
        """A typo in a YAML file fails at load time."""
        _write_settings(tmp_path, {
            "features.yaml": "search_sync_enabled: true\nsearch_sync_enabeld: false\n",
        })
        monkeypatch.chdir(tmp_path)

        from second_brain.backend.core.config import _load_validated

        with pytest.raises(ValueError, match="Invalid configuration in features.yaml"):
            _load_validated(FeaturesSchema, "features.yaml")

    def test_unknown_database_driver_is_rejected(self):
        with pytest.raises(PydanticValidationError):
            DatabaseSchema(
                driver="mysql", host="h", port=1, name="n", user="u",
                pool_size=1, max_overflow=0, pool_timeout=1, pool_recycle=1,
                echo=False, create_tables=True,
            )


# =============================================================================
# URL helpers
# =============================================================================


class TestUrlHelpers:
    def test_search_url_from_node(self):
        node = get_app_config().search.node
        assert get_search_url() == f"{node.protocol}://{node.host}:{node.port}"

    def test_server_base_url(self):
        base_url, timeout = get_server_base_url()
        server = get_app_config().application.server
        assert base_url == f"http://{server.host}:{server.port}"
        assert timeout > 0

    def test_database_url_sqlite(self, monkeypatch):
        config = get_app_config()
        sqlite_db = config.database.model_copy(update={"driver": "sqlite", "name": "brain.db"})
        monkeypatch.setattr(config, "_database", sqlite_db)

        assert get_database_url() == "sqlite+aiosqlite:///brain.db"

    def test_database_url_postgres(self, monkeypatch):
        monkeypatch.setenv("SEARCH_API_KEY", "xyz")
        monkeypatch.setenv("DB_PASSWORD", "secret")
        monkeypatch.setattr(
            "second_brain.backend.core.config.get_settings",
            lambda: Settings(_env_file=None),
        )
        db = get_app_config().database

        url = get_database_url()

        assert url == f"postgresql+asyncpg://{db.user}:secret@{db.host}:{db.port}/{db.name}"
