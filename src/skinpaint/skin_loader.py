import os
import io
import re
import json
import base64
import logging

import numpy as np
import requests
from PIL import Image

from .errors import SkinLoadError
from .texture import ATLAS_SIZE, Texture

logger = logging.getLogger(__name__)


class SkinLoader:
    MOJANG_PROFILE_URL = "https://api.mojang.com/users/profiles/minecraft/{}"
    MOJANG_SESSION_URL = "https://sessionserver.mojang.com/session/minecraft/profile/{}"
    TIMEOUT = 10

    @staticmethod
    def load_skin(source: str) -> Image.Image:
        """
        Loads a skin from a file path, URL, or Minecraft username.
        """
        if os.path.exists(source):
            return SkinLoader._load_from_file(source)
        elif source.startswith("http://") or source.startswith("https://"):
            return SkinLoader._load_from_url(source)
        elif re.match(r"^[a-zA-Z0-9_]{3,16}$", source):
            return SkinLoader._load_from_username(source)
        else:
            raise SkinLoadError(f"Invalid skin source: {source}")

    @staticmethod
    def load_texture(source: str) -> Texture:
        return SkinLoader.to_texture(SkinLoader.load_skin(source))

    @staticmethod
    def _load_from_file(path: str) -> Image.Image:
        try:
            img = Image.open(path)
            img.load()  # Force load
        except Exception as e:
            raise SkinLoadError(f"Failed to load skin from file: {e}") from e
        return SkinLoader._validate_and_process(img)

    @staticmethod
    def _load_from_url(url: str) -> Image.Image:
        try:
            response = requests.get(url, timeout=SkinLoader.TIMEOUT)
            response.raise_for_status()
            img = Image.open(io.BytesIO(response.content))
            img.load()
        except Exception as e:
            raise SkinLoadError(f"Failed to load skin from URL: {e}") from e
        return SkinLoader._validate_and_process(img)

    @staticmethod
    def _load_from_username(username: str) -> Image.Image:
        try:
            # 1. Get UUID
            resp = requests.get(SkinLoader.MOJANG_PROFILE_URL.format(username), timeout=SkinLoader.TIMEOUT)
            resp.raise_for_status()
            uuid = resp.json().get("id")
            if not uuid:
                raise SkinLoadError("User not found")

            # 2. Get Profile (Skin URL)
            resp = requests.get(SkinLoader.MOJANG_SESSION_URL.format(uuid), timeout=SkinLoader.TIMEOUT)
            resp.raise_for_status()
            texture_data = None
            for prop in resp.json().get("properties", []):
                if prop.get("name") == "textures":
                    texture_data = prop.get("value")
                    break

            if not texture_data:
                raise SkinLoadError("No texture data found")

            texture_json = json.loads(base64.b64decode(texture_data).decode("utf-8"))
            skin_url = texture_json.get("textures", {}).get("SKIN", {}).get("url")
            if not skin_url:
                raise SkinLoadError("No skin URL found in texture data")
        except Exception as e:
            raise SkinLoadError(f"Failed to fetch skin for user '{username}': {e}") from e

        return SkinLoader._load_from_url(skin_url)

    @staticmethod
    def _validate_and_process(img: Image.Image) -> Image.Image:
        """
        Validates dimensions and converts to RGBA.
        Upgrades legacy 64x32 skins to 64x64.
        """
        if img.mode != "RGBA":
            img = img.convert("RGBA")

        width, height = img.size

        if width == ATLAS_SIZE and height == ATLAS_SIZE:
            return img
        elif width == ATLAS_SIZE and height == 32:
            logger.info("Detected 64x32 skin, converting to 64x64 (legacy format)")
            new_img = Image.new("RGBA", (ATLAS_SIZE, ATLAS_SIZE), (0, 0, 0, 0))
            new_img.paste(img, (0, 0))

            # Legacy skins share one texture for both sides:
            # Right Leg (0, 16, 16, 32) -> Left Leg (16, 48)
            right_leg = img.crop((0, 16, 16, 32))
            new_img.paste(right_leg.transpose(Image.Transpose.FLIP_LEFT_RIGHT), (16, 48))

            # Right Arm (40, 16, 56, 32) -> Left Arm (32, 48)
            right_arm = img.crop((40, 16, 56, 32))
            new_img.paste(right_arm.transpose(Image.Transpose.FLIP_LEFT_RIGHT), (32, 48))

            return new_img
        else:
            raise SkinLoadError(f"Unsupported skin dimensions: {width}x{height}. Must be 64x64.")

    @staticmethod
    def detect_model(img: Image.Image) -> str:
        """
        Detects if skin is Classic (Steve) or Slim (Alex).
        Checks pixel at (54, 20) (right arm back). If transparent -> slim.
        """
        if img.mode != "RGBA":
            img = img.convert("RGBA")
        r, g, b, a = img.getpixel((54, 20))
        if a == 0:
            return "slim"
        return "classic"

    @staticmethod
    def to_texture(img: Image.Image) -> Texture:
        """The whole image becomes the base layer; the overlay starts empty."""
        img = SkinLoader._validate_and_process(img)
        return Texture(base=np.array(img, dtype=np.uint8))

    @staticmethod
    def from_texture(texture: Texture) -> Image.Image:
        """Flattens both layers into a single 64x64 RGBA image."""
        return Image.fromarray(texture.composite())

    @staticmethod
    def save_png(texture: Texture, path: str):
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        SkinLoader.from_texture(texture).save(path, format="PNG")
        logger.debug(f"Saved skin to {path}")
