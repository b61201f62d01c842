from __future__ import annotations

import os
import pathlib

CLUSTER_CONFIG_FILENAME = "cluster.yaml"


class Paths:
    @property
    def root(self) -> pathlib.Path:
        """Return the stack configuration overlay directory.

        Raises:
            RuntimeError: If AKSPROV_ROOT is not set in the environment

        """
        if "AKSPROV_ROOT" not in os.environ:
            msg = "AKSPROV_ROOT environment variable not set."
            raise RuntimeError(msg)

        return pathlib.Path(os.environ["AKSPROV_ROOT"])

    @property
    def is_configured(self) -> bool:
        return "AKSPROV_ROOT" in os.environ

    def stack_dir(self, stack: str) -> pathlib.Path:
        return self.root / stack

    def cluster_yaml(self, stack: str) -> pathlib.Path:
        return self.stack_dir(stack) / CLUSTER_CONFIG_FILENAME
