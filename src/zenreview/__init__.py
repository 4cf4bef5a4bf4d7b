"""zenreview - streaming Chinese proofreading review"""

__version__ = "0.1.0"
