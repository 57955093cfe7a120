from fastapi import APIRouter
from app.api.api_v1.endpoints import salons, services, availability, availability_blocks, bookings, appointments

router = APIRouter()

# Include all routers
router.include_router(salons.router, prefix="/salons", tags=["Salons"])
router.include_router(services.router, prefix="/services", tags=["Services"])
router.include_router(availability.router, prefix="/availability", tags=["Availability"])
router.include_router(availability_blocks.router, prefix="/availability-blocks", tags=["Availability Blocks"])
router.include_router(bookings.router, prefix="/bookings", tags=["Bookings"])
router.include_router(appointments.router, prefix="/appointments", tags=["Appointments"])
