"""
Process wiring for the product API: settings, per-request database
connections and logging setup.
"""
