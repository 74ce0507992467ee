from fastapi import APIRouter
from crm_backend.api.routers import addresses, customer_views, customers, health

# This is the main router of the API, mounted under API_PREFIX
api_router = APIRouter()

api_router.include_router(health.router, tags=["Health"])

# /customers and /customers/{customer_id}
api_router.include_router(customers.router, prefix="/customers", tags=["Customers"])

# Addresses live under both /customers/{customer_id}/addresses and /addresses/{address_id}
api_router.include_router(addresses.router, tags=["Addresses"])

# Fixed aggregate views, not paginated
api_router.include_router(customer_views.router, tags=["Customer Views"])
