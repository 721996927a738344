"""
Configuration record and loading.
"""

from hostprep.config.record import ConfigurationRecord, validate_computer_name
from hostprep.config.loader import load_record, parse_record

__all__ = ["ConfigurationRecord", "validate_computer_name", "load_record", "parse_record"]
