"""
Domain layer for the inventory.
Contains asset code generation, asset rules and the domain exceptions,
separated from data persistence concerns.
"""
