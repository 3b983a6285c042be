"""
Packaged configuration data: bank registry and validation rules.
"""
