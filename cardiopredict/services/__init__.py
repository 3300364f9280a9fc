"""
Service layer: prediction workflow, history store and reports.
"""
