"""
Core risk engine: patient data, randomness, ECG synthesis and inference.
"""
