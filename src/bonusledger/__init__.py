"""Loyalty bonus ledger: purchases, bonus accrual and redemption, refunds."""

import logging

# Library modules log through child loggers; the CLI installs handlers.
logging.getLogger(__name__).addHandler(logging.NullHandler())


# Import main lazily to avoid circular dependencies
def __getattr__(name):
    if name == "main":
        from bonusledger.cli.main import main
        return main
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
