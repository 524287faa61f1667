from utils import app_config


def test_api_url_precedence(tmp_path, monkeypatch):
    monkeypatch.setattr(app_config, "CONFIG_DIR", tmp_path)
    monkeypatch.setattr(app_config, "CONFIG_FILE", tmp_path / "config.json")
    monkeypatch.delenv(app_config.API_URL_ENV, raising=False)
    assert app_config.get_api_base_url() == "http://localhost:8080/api"

    app_config.set_value("api_base_url", "http://budget.local/api/")
    assert app_config.get_api_base_url() == "http://budget.local/api"

    monkeypatch.setenv(app_config.API_URL_ENV, "http://env.example/api")
    assert app_config.get_api_base_url() == "http://env.example/api"


def test_config_tolerates_garbage(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    path.write_text("[1, 2", encoding="utf-8")
    monkeypatch.setattr(app_config, "CONFIG_DIR", tmp_path)
    monkeypatch.setattr(app_config, "CONFIG_FILE", path)
    assert app_config.load_config() == {}
    assert app_config.get_log_level() == "INFO"
    assert app_config.get_request_timeout() == 10.0
