"""Unit tests for configuration loading and topology parsing."""

from pathlib import Path

import pytest

from proxysync.adapters.config.loader import ConfigLoader
from proxysync.adapters.config.sync_parser import (
    CONFIG_ENTRIES,
    load_topology,
    parse_sync_config,
    parse_topology,
)
from proxysync.core.exceptions import ConfigError, TopologyError

BASE = {
    "host": "proxy.internal",
    "user": "deploy",
    "password": "secret",
    "remote_dir": "/etc/haproxy/conf.d",
    "http_port": 80,
    "reload_command": "systemctl reload haproxy",
}


class TestParseSyncConfig:
    def test_defaults(self):
        config = parse_sync_config(BASE)

        assert config.port == 22
        assert config.remote_dir == "/etc/haproxy/conf.d/"
        assert config.https_port is None
        assert config.force_https is False
        assert config.transport == "sftp"
        assert config.parallel == 4

    @pytest.mark.parametrize("key", [e.name for e in CONFIG_ENTRIES if e.mandatory])
    def test_missing_required_value(self, key):
        cfg = {k: v for k, v in BASE.items() if k != key}
        with pytest.raises(ConfigError, match=key):
            parse_sync_config(cfg)

    def test_wrong_type(self):
        with pytest.raises(ConfigError, match="http_port"):
            parse_sync_config(dict(BASE, http_port="eighty"))

    def test_bool_is_not_a_port(self):
        with pytest.raises(ConfigError, match="https_port"):
            parse_sync_config(dict(BASE, https_port=True))

    def test_port_range(self):
        with pytest.raises(ConfigError, match="Invalid http_port"):
            parse_sync_config(dict(BASE, http_port=70000))

    def test_use_cat_selects_command_transport(self):
        assert parse_sync_config(dict(BASE, use_cat=True)).transport == "command"

    def test_explicit_transport_wins(self):
        assert parse_sync_config(dict(BASE, use_cat=True, transport="sftp")).transport == "sftp"

    def test_invalid_transport(self):
        with pytest.raises(ConfigError, match="transport"):
            parse_sync_config(dict(BASE, transport="rsync"))

    def test_credentials_required(self):
        cfg = {k: v for k, v in BASE.items() if k != "password"}
        with pytest.raises(ConfigError, match="password or key_file"):
            parse_sync_config(cfg)

    def test_key_file_only(self):
        cfg = {k: v for k, v in BASE.items() if k != "password"}
        config = parse_sync_config(dict(cfg, key_file="~/.ssh/id_ed25519"))

        assert config.connection_params()["key"] == "~/.ssh/id_ed25519"
        assert "password" not in config.connection_params()

    def test_ssh_config_alias(self, monkeypatch):
        monkeypatch.setattr(
            "proxysync.adapters.config.sync_parser.load_ssh_config",
            lambda name: {"host": "10.1.1.1", "port": 2222, "user": "alias-user"},
        )
        cfg = {k: v for k, v in BASE.items() if k not in ("host", "user")}
        config = parse_sync_config(dict(cfg, ssh_config="lb"))

        assert (config.host, config.port, config.user) == ("10.1.1.1", 2222, "alias-user")


class TestConfigLoader:
    def test_env_overrides_toml(self, tmp_path, monkeypatch):
        path = tmp_path / "proxy.toml"
        path.write_text('host = "a"\nhttp_port = 80\nforce_https = false\n')
        monkeypatch.setenv("PROXYSYNC_HTTP_PORT", "8080")
        monkeypatch.setenv("PROXYSYNC_FORCE_HTTPS", "true")

        cfg = ConfigLoader().load(toml_path=path)

        assert cfg == {"host": "a", "http_port": 8080, "force_https": True}

    def test_cli_overrides_env(self, monkeypatch):
        monkeypatch.setenv("PROXYSYNC_HOST", "env-host")
        cfg = ConfigLoader().load(cli_overrides={"host": "cli-host", "user": None})

        assert cfg["host"] == "cli-host"
        assert "user" not in cfg

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            ConfigLoader().load(toml_path=tmp_path / "missing.toml")

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / "bad.toml"
        path.write_text("host = \n")
        with pytest.raises(ConfigError, match="Failed to parse"):
            ConfigLoader().load(toml_path=path)


TOPOLOGY_TOML = """
[[service]]
name = "api"
ports = { http = 8080 }
nodes = ["10.0.0.5", { ip = "10.0.0.6" }]

[[service.route]]
order = 0
port = "http"
domains = ["api.example.com"]
paths = ["/v1"]
auth = ["ops"]

[[service]]
name = "web"
ports = { http = 3000 }
nodes = ["10.0.1.1"]

[[service.route]]
order = 0
port = "http"
"""


class TestTopologyParser:
    def test_load_topology(self, tmp_path):
        path = tmp_path / "services.toml"
        path.write_text(TOPOLOGY_TOML)

        topology = load_topology(path)

        api, web = topology.services
        assert api.name == "api"
        assert api.ports == {"http": 8080}
        assert [n.ip for n in api.nodes] == ["10.0.0.5", "10.0.0.6"]
        route = api.routes[0]
        assert (route.order, route.port, route.domains, route.paths, route.auth) == (
            0, "http", ["api.example.com"], ["/v1"], ["ops"]
        )
        assert web.routes[0].is_default

    def test_route_order_must_be_int(self):
        data = {"service": [{"name": "api", "ports": {"http": 80},
                             "route": [{"order": "first", "port": "http"}]}]}
        with pytest.raises(TopologyError, match="order"):
            parse_topology(data)

    def test_domains_must_be_strings(self):
        data = {"service": [{"name": "api", "ports": {"http": 80},
                             "route": [{"order": 0, "port": "http", "domains": [1]}]}]}
        with pytest.raises(TopologyError, match="domains"):
            parse_topology(data)

    def test_invalid_node(self):
        data = {"service": [{"name": "api", "ports": {"http": 80}, "nodes": [42]}]}
        with pytest.raises(TopologyError, match="invalid node"):
            parse_topology(data)

    def test_nodes_must_be_a_list(self):
        data = {"service": [{"name": "api", "ports": {"http": 80}, "nodes": "10.0.0.5"}]}
        with pytest.raises(TopologyError, match="'nodes' must be a list"):
            parse_topology(data)

    def test_single_route_table_rejected(self, tmp_path):
        path = tmp_path / "services.toml"
        path.write_text(
            '[[service]]\nname = "api"\nports = { http = 80 }\n\n'
            '[service.route]\norder = 0\nport = "http"\n'
        )
        with pytest.raises(TopologyError, match=r"\[\[service.route\]\]"):
            load_topology(path)

    @pytest.mark.parametrize("route", ["http", 0])
    def test_route_entry_must_be_a_table(self, route):
        data = {"service": [{"name": "api", "ports": {"http": 80}, "route": [route]}]}
        with pytest.raises(TopologyError, match="route must be a table"):
            parse_topology(data)

    def test_service_entry_must_be_a_table(self):
        with pytest.raises(TopologyError, match="Service must be a table"):
            parse_topology({"service": ["api"]})

    def test_duplicate_order_rejected(self):
        data = {"service": [{"name": "api", "ports": {"http": 80}, "route": [
            {"order": 1, "port": "http"}, {"order": 1, "port": "http"},
        ]}]}
        with pytest.raises(TopologyError, match="duplicate route order"):
            parse_topology(data)

    def test_invalid_port_value(self):
        data = {"service": [{"name": "api", "ports": {"http": "80"}}]}
        with pytest.raises(TopologyError, match="invalid port"):
            parse_topology(data)

    def test_missing_file(self, tmp_path):
        with pytest.raises(TopologyError, match="not found"):
            load_topology(Path(tmp_path / "nope.toml"))
