from pydantic import BaseModel


class PointXYZ(BaseModel):
    x: float
    y: float
    z: float


class PointXYZRGB(PointXYZ):
    r: int = 0  # 0-255
    g: int = 0  # 0-255
    b: int = 0  # 0-255
