"""
Bootstrap - retrieve configuration artifacts and load the record.
"""

from hostprep.bootstrap.fetch import Bootstrapper, fetch, bootstrap

__all__ = ["Bootstrapper", "fetch", "bootstrap"]
