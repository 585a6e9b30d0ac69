"""HTTP clients for the Supabase project APIs and the Management API."""

from .base import RequestSpec, RESTClient
from .management import MANAGEMENT_BASE, ManagementClient
from .supabase import SupabaseClient

__all__ = ["RequestSpec", "RESTClient", "MANAGEMENT_BASE", "ManagementClient", "SupabaseClient"]
