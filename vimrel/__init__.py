"""Build release descriptors for Vim plugins and publish them on www.vim.org."""

__all__ = ["__version__"]

__version__ = "0.2.0"
