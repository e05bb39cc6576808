import argparse
import json
import logging
import sys
from pathlib import Path

from PIL import Image
from pydantic import ValidationError

from .config import AppConfig
from .device.api import DeviceError
from .device.reference import ReferenceDevice
from .scene.primitives import checkerboard_to_rgb8, make_checkerboard
from .scene.registry import UnknownSceneError, available_scene_categories, available_scene_names, create_scene

log = logging.getLogger(__name__)

def _parser():
    p = argparse.ArgumentParser(prog="anariscenes", description="Build test scenes on the reference device")
    p.add_argument("--list", action="store_true", help="list registered scenes and exit")
    p.add_argument("--category", default="demo")
    p.add_argument("--scene", default="textured_cube")
    p.add_argument("--config", type=Path, help="JSON file with AppConfig overrides")
    p.add_argument("--dump", type=Path, help="write the committed world and cameras as JSON")
    p.add_argument("--texture", type=Path, help="write the checkerboard texture as an image")
    p.add_argument("--texture-scale", type=int, default=32, help="pixels per texel in --texture output")
    p.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p

def _load_config(path):
    if path is None:
        return AppConfig()
    return AppConfig.model_validate_json(path.read_text())

def write_texture(path, cfg: AppConfig, scale=32):
    t = cfg.textured_cube.texture
    img = Image.fromarray(checkerboard_to_rgb8(make_checkerboard(t.dim, t.light, t.dark)))
    if scale > 1:
        img = img.resize((t.dim * scale, t.dim * scale), Image.Resampling.NEAREST)
    img.save(path)
    return img

def main(argv=None):
    p = _parser()
    args = p.parse_args(argv)

    try:
        cfg = _load_config(args.config)
    except (OSError, ValidationError) as e:
        p.error(f"bad config {args.config}: {e}")
    logging.basicConfig(level=args.log_level or cfg.log_level,
                        format="%(levelname)s %(name)s: %(message)s")

    if args.list:
        for cat in available_scene_categories():
            for name in available_scene_names(cat):
                print(f"{cat}/{name}")
        return 0

    device = ReferenceDevice()
    try:
        scene = create_scene(device, args.category, args.scene, cfg)
    except UnknownSceneError as e:
        p.error(e.args[0])

    try:
        with scene:
            scene.commit()
            world = scene.world()
            instances = device.parameters(world).get("instance")
            n = len(device.array_data(instances)) if instances is not None else 0
            bounds = scene.bounds()
            cams = scene.cameras()
            print(f"{args.category}/{args.scene}: {n} instances, "
                  f"{len(device.live_objects())} live objects")
            if bounds is not None:
                print(f"bounds: {bounds[0].tolist()} .. {bounds[1].tolist()}")
            for c in cams:
                print(f"camera: {c!r}")
            if args.dump is not None:
                doc = {"scene": f"{args.category}/{args.scene}",
                       "world": device.snapshot(world),
                       "cameras": [c.to_dict() for c in cams]}
                args.dump.write_text(json.dumps(doc, indent=2))
                log.info("wrote %s", args.dump)
    except DeviceError as e:
        log.error("device rejected scene %s/%s: %s", args.category, args.scene, e)
        return 1

    if args.texture is not None:
        write_texture(args.texture, cfg, args.texture_scale)
        log.info("wrote %s", args.texture)
    return 0

if __name__ == "__main__":
    sys.exit(main())
