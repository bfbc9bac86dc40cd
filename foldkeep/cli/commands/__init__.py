# foldkeep/cli/commands/__init__.py
