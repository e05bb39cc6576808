from typing import Literal

from pydantic import BaseModel, Field, model_validator

def _vec3(*v):
    return Field(default_factory=lambda: list(v), min_length=3, max_length=3)

class CameraConfig(BaseModel):
    position: list[float] = _vec3(1.25, 1.25, 1.25)
    at: list[float] = _vec3(0.0, 0.0, 0.0)
    up: list[float] = _vec3(0.0, 1.0, 0.0)

    @model_validator(mode="after")
    def _check_frame(self):
        if self.position == self.at:
            raise ValueError("camera position and look-at target coincide")
        if not any(self.up):
            raise ValueError("camera up vector is zero")
        return self

class TextureConfig(BaseModel):
    dim: int = Field(8, ge=2, description="Texels per side of the square checkerboard")
    light: float = Field(0.8, ge=0.0, le=1.0, description="Gray level where h + w is even")
    dark: float = Field(0.2, ge=0.0, le=1.0, description="Gray level where h + w is odd")
    filter: Literal["nearest", "linear"] = "nearest"

    @model_validator(mode="after")
    def _check_levels(self):
        if self.light == self.dark:
            raise ValueError("checkerboard light and dark levels must differ")
        return self

class TexturedCubeConfig(BaseModel):
    face_offset: float = Field(0.5, description="Distance from the cube center to each face")
    material: str = "matte"
    texture: TextureConfig = TextureConfig()
    camera: CameraConfig = CameraConfig()

class AmbientLightConfig(BaseModel):
    color: list[float] = _vec3(1.0, 1.0, 1.0)
    intensity: float = Field(1.0, ge=0.0)

class AppConfig(BaseModel):
    textured_cube: TexturedCubeConfig = TexturedCubeConfig()
    ambient_light: AmbientLightConfig = AmbientLightConfig()
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
