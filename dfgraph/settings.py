"""
Runtime settings, read from the environment.

A ``.env`` file in the working directory is loaded first so local overrides
don't need a manual ``export``.

    DFGRAPH_VAR_PREFIX     prefix of generated dataframe variables   (var_)
    DFGRAPH_NODE_COMMENTS  prefix each statement with a node comment (true)
    DFGRAPH_LOG_LEVEL      logging level for the CLI and server      (WARNING)
    DFGRAPH_HOST           server bind address                       (0.0.0.0)
    DFGRAPH_PORT           server port                               (3001)
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

_TRUE = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    var_prefix: str = "var_"
    node_comments: bool = True
    log_level: str = "WARNING"
    host: str = "0.0.0.0"
    port: int = 3001

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        if environ is None:
            load_dotenv()
            environ = os.environ
        defaults = cls()
        comments = environ.get("DFGRAPH_NODE_COMMENTS")
        return cls(
            var_prefix=environ.get("DFGRAPH_VAR_PREFIX", defaults.var_prefix),
            node_comments=defaults.node_comments if comments is None else comments.strip().lower() in _TRUE,
            log_level=environ.get("DFGRAPH_LOG_LEVEL", defaults.log_level).upper(),
            host=environ.get("DFGRAPH_HOST", defaults.host),
            port=int(environ.get("DFGRAPH_PORT", defaults.port)),
        )
