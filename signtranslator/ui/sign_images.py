import os
import logging
from typing import Tuple
from PIL import Image, ImageDraw, ImageFont

from signtranslator.paths import get_resource_path

PLACEHOLDER_BG = (229, 229, 234)
PLACEHOLDER_FG = (142, 142, 147)


class SignImageLibrary:
    """
    Looks up the sign image of a character (resources/signs/A.png, ...).
    Missing assets get a generated placeholder showing the character.
    """

    def __init__(self, image_dir: str = "signs", size: Tuple[int, int] = (200, 200)):
        self.logger = logging.getLogger(__name__)
        self.image_dir = get_resource_path(image_dir)
        self.size = (int(size[0]), int(size[1]))

    @staticmethod
    def image_name(character: str) -> str:
        # Asset names are the upper-case character itself
        return character.upper()

    def image_path(self, character: str) -> str:
        return os.path.join(self.image_dir, f"{self.image_name(character)}.png")

    def has_image(self, character: str) -> bool:
        return os.path.exists(self.image_path(character))

    def load(self, character: str) -> Image.Image:
        """Sign image scaled to fit self.size, or a placeholder."""
        path = self.image_path(character)
        if os.path.exists(path):
            try:
                with Image.open(path) as img:
                    image = img.convert("RGBA")
                image.thumbnail(self.size, Image.Resampling.LANCZOS)
                return image
            except OSError as e:
                self.logger.warning(f"Could not read sign image {path}: {e}")
        return self.placeholder(character)

    def placeholder(self, character: str) -> Image.Image:
        image = Image.new("RGBA", self.size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(image)
        w, h = self.size
        draw.rounded_rectangle((0, 0, w - 1, h - 1), radius=12, fill=PLACEHOLDER_BG)

        text = self.image_name(character)
        font = ImageFont.load_default()
        left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
        x = (w - (right - left)) / 2
        y = (h - (bottom - top)) / 2
        draw.text((x, y), text, fill=PLACEHOLDER_FG, font=font)
        return image
