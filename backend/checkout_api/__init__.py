"""Shade checkout API: storefront checkout bridge to the Shopify Admin API."""

__version__ = "1.0.0"
