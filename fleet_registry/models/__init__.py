from fleet_registry.models.vehicle import Vehicle, VehicleStatus

__all__ = ["Vehicle", "VehicleStatus"]
