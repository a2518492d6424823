# dexmetrics/cli/__init__.py
