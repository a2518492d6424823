# dexmetrics/cli/commands/__init__.py
