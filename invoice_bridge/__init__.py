"""Shopify / custom storefront order to Xero invoice bridge."""
