"""Region history ring with interactive, cancellable preview."""

__all__ = [
    "adapters",
    "buffer",
    "commands",
    "host",
    "keymaps",
    "preview",
    "regions",
    "runtime",
]

__version__ = "0.1.0"
