from ..config import AppConfig
from .textured_cube import scene_textured_cube

class UnknownSceneError(KeyError):
    pass

def _textured_cube(device, app: AppConfig):
    return scene_textured_cube(device, app.textured_cube, app.ambient_light)

_SCENES = {
    "demo": {
        "textured_cube": _textured_cube,
    },
}

def available_scene_categories():
    return sorted(_SCENES)

def available_scene_names(category):
    try:
        return sorted(_SCENES[category])
    except KeyError:
        raise UnknownSceneError(f"unknown scene category '{category}'") from None

def create_scene(device, category, name, config: AppConfig = None):
    names = _SCENES.get(category)
    if names is None:
        raise UnknownSceneError(f"unknown scene category '{category}'")
    if name not in names:
        raise UnknownSceneError(f"unknown scene '{category}/{name}'")
    return names[name](device, config or AppConfig())
