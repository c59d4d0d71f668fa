import pytest

from nginxconf.config import load_desired_spec, load_provider_config
from nginxconf.core.errors import ConfigError
from nginxconf.core.models import DEFAULT_STAGING_PATH
from nginxconf.store import StateStore
from nginxconf.core.models import ResourceState


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ("NGINXCONF_HOST", "NGINXCONF_USER", "NGINXCONF_PASSWORD", "NGINXCONF_PORT", "NGINXCONF_CONFIG"):
        monkeypatch.delenv(var, raising=False)


def test_provider_config_from_yaml(tmp_path):
    path = tmp_path / "provider.yaml"
    path.write_text("provider:\n  host: 10.0.0.5\n  user: deploy\n  password: s3cret\n")
    config = load_provider_config(path)
    assert config.host == "10.0.0.5"
    assert config.password.get_secret_value() == "s3cret"
    assert config.port == 22
    assert config.staging_path == DEFAULT_STAGING_PATH
    assert "s3cret" not in repr(config)


def test_env_overrides_yaml(tmp_path, monkeypatch):
    path = tmp_path / "provider.yaml"
    path.write_text("host: a\nuser: b\npassword: c\n")
    monkeypatch.setenv("NGINXCONF_HOST", "override.host")
    monkeypatch.setenv("NGINXCONF_PORT", "2222")
    config = load_provider_config(path)
    assert config.host == "override.host"
    assert config.port == 2222


def test_env_only(tmp_path, monkeypatch):
    monkeypatch.setenv("NGINXCONF_CONFIG", str(tmp_path / "missing.yaml"))
    monkeypatch.setenv("NGINXCONF_HOST", "h")
    monkeypatch.setenv("NGINXCONF_USER", "u")
    monkeypatch.setenv("NGINXCONF_PASSWORD", "p")
    assert load_provider_config().host == "h"


def test_missing_fields(tmp_path):
    path = tmp_path / "provider.yaml"
    path.write_text("host: a\n")
    with pytest.raises(ConfigError):
        load_provider_config(path)


def test_explicit_missing_file(tmp_path):
    with pytest.raises(ConfigError):
        load_provider_config(tmp_path / "nope.yaml")


def test_invalid_yaml(tmp_path):
    path = tmp_path / "provider.yaml"
    path.write_text("host: [unclosed\n")
    with pytest.raises(ConfigError):
        load_provider_config(path)


def test_desired_spec(tmp_path):
    path = tmp_path / "site.yaml"
    path.write_text(
        "nginx_conf:\n"
        "  server_name: example.com\n"
        "  listen_port: 80\n"
        "  root: /var/www/html\n"
        "  path: /etc/nginx/sites-enabled/example.conf\n"
    )
    spec = load_desired_spec(path)
    assert spec.server_name == "example.com"
    assert spec.content is None


def test_desired_spec_relative_path_rejected(tmp_path):
    path = tmp_path / "site.yaml"
    path.write_text("server_name: a\nlisten_port: 80\nroot: /r\npath: relative.conf\n")
    with pytest.raises(ConfigError):
        load_desired_spec(path)


def test_state_store_persists(tmp_path):
    store = StateStore(tmp_path)
    store.put(ResourceState(id="/etc/nginx/a.conf", content="it's\n$x", server_name="a"))
    store.put(ResourceState(id="/etc/nginx/b.conf"))

    reloaded = StateStore(tmp_path)
    assert [s.id for s in reloaded.all()] == ["/etc/nginx/a.conf", "/etc/nginx/b.conf"]
    assert reloaded.get("/etc/nginx/a.conf").content == "it's\n$x"

    assert reloaded.remove("/etc/nginx/a.conf")
    assert not reloaded.remove("/etc/nginx/a.conf")
    assert StateStore(tmp_path).get("/etc/nginx/a.conf") is None


def test_state_store_corrupt(tmp_path):
    (tmp_path / "state.yaml").write_text("resources:\n  /a:\n    id: /a\n    path: /b\n")
    with pytest.raises(ConfigError):
        StateStore(tmp_path).all()
