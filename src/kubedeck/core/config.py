#!/usr/bin/env python3
"""
KUBEDECK CONFIGURATION MANAGER
------------------------------
Handles loading and parsing of user configuration (.kubedeck.yaml).
Allows customization of:
- The kubectl / docker / git binaries
- The namespace used for apply and create
- WSL path translation
- Debug readiness polling bounds

Author: KubeDeck Team
Date: 2026-10-18
"""

import copy
import os
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from ruamel.yaml import YAML, YAMLError

logger = logging.getLogger("kubedeck.config")


class ConfigManager:
    """
    Manages user configuration state.
    defaults:
      kubectl.binary: kubectl
      debug.poll_interval: 1.0
      debug.poll_timeout: 300
    """

    DEFAULT_CONFIG: Dict[str, Dict[str, Any]] = {
        "kubectl": {
            "binary": "kubectl",
            "kubeconfig": None,
            "namespace": None,
            "output_format": "yaml",
            "use_wsl": False,
        },
        "docker": {
            "binary": "docker",
            "image_user": None,
        },
        "git": {
            "binary": "git",
        },
        "debug": {
            "poll_interval": 1.0,
            # 0 disables the bound; polling then only stops on Running
            "poll_timeout": 300,
            "poll_max_attempts": 0,
            "ports": ["5858:5858", "8000:8000"],
            "remote_root": "/",
            "attach_command": None,
        },
    }

    def __init__(self, project_root: Optional[Path] = None,
                 config_file: Optional[Path] = None,
                 environ: Optional[Dict[str, str]] = None):
        self.project_root = project_root
        self.config = copy.deepcopy(self.DEFAULT_CONFIG)
        self.loaded_from: Optional[Path] = None
        self._load_config(config_file)
        self._apply_environment(os.environ if environ is None else environ)

    def _candidate_files(self, config_file: Optional[Path]) -> List[Path]:
        if config_file:
            return [config_file]
        candidates = []
        if self.project_root:
            candidates.append(self.project_root / ".kubedeck" / "config.yaml")
            candidates.append(self.project_root / ".kubedeck.yaml")
        candidates.append(Path.home() / ".kubedeck.yaml")
        return candidates

    def _load_config(self, config_file: Optional[Path]):
        """
        Attempts to load configuration from:
        1. An explicit --config file
        2. <project>/.kubedeck/config.yaml
        3. <project>/.kubedeck.yaml
        4. ~/.kubedeck.yaml
        The first existing file wins.
        """
        yaml = YAML(typ='safe')

        for path in self._candidate_files(config_file):
            if not path.exists():
                continue
            try:
                loaded = yaml.load(path)
            except (YAMLError, OSError) as e:
                logger.warning(f"Failed to parse {path}: {e}")
                return
            if isinstance(loaded, dict):
                self._merge_config(loaded)
            self.loaded_from = path
            logger.info(f"Loaded configuration from {path}")
            return

    def _merge_config(self, user_config: Dict[str, Any]):
        """Section-wise merge of user config into defaults."""
        for section, values in user_config.items():
            if section not in self.config:
                logger.warning(f"Ignoring unknown configuration section '{section}'")
                continue
            if isinstance(values, dict):
                self.config[section].update(values)

    def _apply_environment(self, environ: Dict[str, str]):
        if environ.get("KUBEDECK_KUBECTL"):
            self.config["kubectl"]["binary"] = environ["KUBEDECK_KUBECTL"]
        if environ.get("KUBEDECK_NAMESPACE"):
            self.config["kubectl"]["namespace"] = environ["KUBEDECK_NAMESPACE"]
        if environ.get("KUBECONFIG") and not self.config["kubectl"]["kubeconfig"]:
            self.config["kubectl"]["kubeconfig"] = environ["KUBECONFIG"]

    def get(self, section: str, key: str, default: Any = None) -> Any:
        return self.config.get(section, {}).get(key, default)

    @property
    def kubectl_binary(self) -> str:
        return self.get("kubectl", "binary", "kubectl")

    @property
    def kubeconfig(self) -> Optional[str]:
        return self.get("kubectl", "kubeconfig")

    @property
    def namespace(self) -> Optional[str]:
        return self.get("kubectl", "namespace")

    @property
    def output_format(self) -> str:
        return self.get("kubectl", "output_format", "yaml")

    @property
    def use_wsl(self) -> bool:
        return bool(self.get("kubectl", "use_wsl", False))

    @property
    def docker_binary(self) -> str:
        return self.get("docker", "binary", "docker")

    @property
    def image_user(self) -> Optional[str]:
        return self.get("docker", "image_user")

    @property
    def git_binary(self) -> str:
        return self.get("git", "binary", "git")

    @property
    def poll_interval(self) -> float:
        return float(self.get("debug", "poll_interval", 1.0))

    @property
    def poll_timeout(self) -> Optional[float]:
        value = float(self.get("debug", "poll_timeout", 0) or 0)
        return value if value > 0 else None

    @property
    def poll_max_attempts(self) -> Optional[int]:
        value = int(self.get("debug", "poll_max_attempts", 0) or 0)
        return value if value > 0 else None

    @property
    def debug_ports(self) -> List[str]:
        return list(self.get("debug", "ports", []))

    @property
    def remote_root(self) -> str:
        return self.get("debug", "remote_root", "/")

    @property
    def attach_command(self) -> Optional[str]:
        return self.get("debug", "attach_command")
