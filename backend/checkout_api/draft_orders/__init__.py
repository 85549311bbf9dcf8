"""Draft order creation: request parsing, payload translation, Shopify submission."""
