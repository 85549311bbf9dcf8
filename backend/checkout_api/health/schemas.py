"""Pydantic schemas for the health endpoint.

Field names are camelCase because existing storefront monitors read them.
"""

from typing import Optional

from pydantic import BaseModel


class ConfigStatus(BaseModel):
    shopifyStore: str
    apiToken: str
    cronSecret: str


class ShopifyStatus(BaseModel):
    connected: bool
    shopName: Optional[str] = None
    shopDomain: Optional[str] = None
    plan: Optional[str] = None
    error: Optional[str] = None


class HealthResponse(BaseModel):
    status: str = "ok"
    timestamp: str
    service: str
    version: str
    config: ConfigStatus
    shopify: ShopifyStatus
