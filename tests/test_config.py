from kubedeck.core.config import ConfigManager


def test_defaults(tmp_path):
    config = ConfigManager(tmp_path, tmp_path / "absent.yaml", environ={})
    assert config.kubectl_binary == "kubectl"
    assert config.namespace is None
    assert config.poll_interval == 1.0
    assert config.poll_timeout == 300.0
    assert config.poll_max_attempts is None
    assert config.debug_ports == ["5858:5858", "8000:8000"]
    assert config.loaded_from is None


def test_project_file_is_merged(tmp_path):
    (tmp_path / ".kubedeck.yaml").write_text(
        "kubectl:\n  namespace: shop\n  use_wsl: true\n"
        "debug:\n  poll_timeout: 0\n  poll_max_attempts: 20\n",
        encoding="utf-8",
    )
    config = ConfigManager(tmp_path, environ={})

    assert config.loaded_from == tmp_path / ".kubedeck.yaml"
    assert config.namespace == "shop"
    assert config.use_wsl is True
    assert config.kubectl_binary == "kubectl"
    assert config.poll_timeout is None
    assert config.poll_max_attempts == 20


def test_nested_project_file_wins(tmp_path):
    (tmp_path / ".kubedeck").mkdir()
    (tmp_path / ".kubedeck" / "config.yaml").write_text("docker:\n  image_user: team\n", encoding="utf-8")
    (tmp_path / ".kubedeck.yaml").write_text("docker:\n  image_user: solo\n", encoding="utf-8")
    assert ConfigManager(tmp_path, environ={}).image_user == "team"


def test_environment_overrides(tmp_path):
    (tmp_path / ".kubedeck.yaml").write_text("kubectl:\n  namespace: shop\n", encoding="utf-8")
    config = ConfigManager(tmp_path, environ={
        "KUBEDECK_KUBECTL": "/opt/kubectl",
        "KUBEDECK_NAMESPACE": "staging",
        "KUBECONFIG": "/home/me/.kube/other",
    })
    assert config.kubectl_binary == "/opt/kubectl"
    assert config.namespace == "staging"
    assert config.kubeconfig == "/home/me/.kube/other"


def test_broken_file_keeps_defaults(tmp_path):
    broken = tmp_path / "broken.yaml"
    broken.write_text("kubectl: [unclosed\n", encoding="utf-8")
    config = ConfigManager(tmp_path, broken, environ={})
    assert config.kubectl_binary == "kubectl"
    assert config.loaded_from is None


def test_unknown_section_is_ignored(tmp_path):
    custom = tmp_path / "custom.yaml"
    custom.write_text("plugins:\n  x: 1\ngit:\n  binary: /usr/local/bin/git\n", encoding="utf-8")
    config = ConfigManager(tmp_path, custom, environ={})
    assert config.git_binary == "/usr/local/bin/git"
    assert "plugins" not in config.config
