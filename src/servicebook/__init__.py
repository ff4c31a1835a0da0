"""Workshop ledger, customer registry and service follow-ups."""

__version__ = "0.1.0"


def __getattr__(name):
    # The CLI imports every service, so load it only on request
    if name == "main":
        from servicebook.cli.main import main

        return main
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
