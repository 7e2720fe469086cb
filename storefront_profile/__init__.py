"""Breeder storefront profile: merge, normalize, edit and publish."""
