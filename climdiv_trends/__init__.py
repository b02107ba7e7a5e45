# -*- coding: utf-8 -*-

"""Top-level package for climdiv_trends."""

__version__ = '0.1.0'
