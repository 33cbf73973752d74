from src.wiki.settings import get_settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in [
            "PERSISTENCE_BACKEND",
            "SQLITE_DB_PATH",
            "CORS_ALLOW_ORIGINS",
            "SEED_SAMPLE_DATA",
            "SEARCH_MIN_LENGTH",
            "LOG_LEVEL",
        ]:
            monkeypatch.delenv(name, raising=False)
        s = get_settings()
        assert s.persistence_backend == "memory"
        assert s.sqlite_db_path == "./data/wiki.db"
        assert s.cors_allow_origins == ["*"]
        assert s.seed_sample_data is False
        assert s.search_min_length == 3
        assert s.log_level == "INFO"

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("PERSISTENCE_BACKEND", "SQLite")
        monkeypatch.setenv("CORS_ALLOW_ORIGINS", "http://a.test, http://b.test")
        monkeypatch.setenv("SEED_SAMPLE_DATA", "yes")
        monkeypatch.setenv("SEARCH_MIN_LENGTH", "5")
        s = get_settings()
        assert s.persistence_backend == "sqlite"
        assert s.cors_allow_origins == ["http://a.test", "http://b.test"]
        assert s.seed_sample_data is True
        assert s.search_min_length == 5

    def test_invalid_values_fall_back(self, monkeypatch):
        monkeypatch.setenv("PERSISTENCE_BACKEND", "postgres")
        monkeypatch.setenv("SEARCH_MIN_LENGTH", "many")
        monkeypatch.setenv("PORT", "-1")
        s = get_settings()
        assert s.persistence_backend == "memory"
        assert s.search_min_length == 3
        assert s.port == 8000
