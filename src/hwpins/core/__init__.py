"""
hwpins core: configuration, the hardware manager and pin-level helpers.
"""
