"""pressroom — listing pages, tag indices, TOCs, widgets and feeds for a docs site."""

__version__ = "0.1.0"
