"""
CardioPredict: multi-model cardiovascular risk prediction service.
"""
__version__ = "1.0.0"
