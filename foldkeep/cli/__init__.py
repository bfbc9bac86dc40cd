# foldkeep/cli/__init__.py
from foldkeep.cli.cli import app

__all__ = ["app"]
