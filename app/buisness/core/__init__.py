"""
Inventory rules shared by the services: asset codes, asset data cleanup and domain errors
"""
