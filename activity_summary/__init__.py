"""Activity summary package for the Personal Activity Summary tool.

This package contains the core modules: models, time_range, aggregator,
data_loader, reporter, main.
"""

__all__ = [
    'models',
    'time_range',
    'aggregator',
    'data_loader',
    'reporter',
    'main'
]
