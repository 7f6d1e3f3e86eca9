"""submoduler-parent: orchestrate git operations across a parent repo and its submodules."""

__version__ = "0.3.0"
