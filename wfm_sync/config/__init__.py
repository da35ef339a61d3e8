"""
Configuration module for the WorkflowMax sync.
"""
from .billing_mapping import load_billing_mapping, parse_billing_mapping
from .settings import (
    WfmSyncConfig,
    get_config,
    load_config,
    reload_config
)

__all__ = [
    'WfmSyncConfig',
    'get_config',
    'load_config',
    'reload_config',
    'load_billing_mapping',
    'parse_billing_mapping'
]
