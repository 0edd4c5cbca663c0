from .shapely_geometry import ShapelyGeometryService

__all__ = ["ShapelyGeometryService"]
