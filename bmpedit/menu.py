"""Interactive numbered menu around the image operations."""

from __future__ import annotations

import warnings
from typing import Callable, Optional

from .codec import BmpImage, describe, format_info, load_image, save_image
from .convolution import FilterKind, apply_named_filter
from .equalize import DegenerateHistogramWarning, equalize
from .errors import BmpError
from .operators import brightness, grayscale, negative, threshold

MENU = """
Image Processing Menu:
1. Load an 8-bit image
2. Load a 24-bit image
3. Save image
4. Display image info
5. Negative
6. Adjust brightness
7. Threshold (8-bit)
8. Grayscale (24-bit)
9. Box blur
10. Gaussian blur
11. Outline
12. Emboss
13. Sharpen
14. Histogram equalization
15. Quit"""

QUIT_CHOICE = 15
FILTER_CHOICES = {
    9: FilterKind.BOX,
    10: FilterKind.GAUSSIAN,
    11: FilterKind.OUTLINE,
    12: FilterKind.EMBOSS,
    13: FilterKind.SHARPEN,
}


class MenuSession:
    """Holds the current image and dispatches menu choices.

    ``read`` receives a prompt and returns a line (raising ``EOFError`` at the
    end of input); ``write`` prints a line.
    """

    def __init__(
        self,
        read: Callable[[str], str] = input,
        write: Callable[[str], None] = print,
    ) -> None:
        self.read = read
        self.write = write
        self.image: Optional[BmpImage] = None

    def _read_int(self, prompt: str) -> Optional[int]:
        raw = self.read(prompt).strip()
        try:
            return int(raw)
        except ValueError:
            self.write(f"Invalid number: {raw!r}")
            return None

    def run(self) -> None:
        while True:
            self.write(MENU)
            try:
                choice = self._read_int(">>> Your choice: ")
                if choice is None:
                    continue
                if choice == QUIT_CHOICE:
                    break
                self.handle(choice)
            except EOFError:
                break
        self.write("Exiting...")

    def handle(self, choice: int) -> None:
        if choice in (1, 2):
            self._load(8 if choice == 1 else 24)
            return
        if not 3 <= choice < QUIT_CHOICE:
            self.write("Invalid choice. Try again.")
            return
        if self.image is None:
            self.write("No image loaded.")
            return
        try:
            self._apply(choice, self.image)
        except BmpError as exc:
            self.write(f"Error: {exc}")

    def _load(self, depth: int) -> None:
        path = self.read(f"Enter file path to load ({depth}-bit BMP): ").strip()
        try:
            image = load_image(path, expected_depth=depth)
        except BmpError as exc:
            self.write(f"Error: {exc}")
            return
        self.image = image
        self.write(f"Image loaded successfully: {image.width} x {image.height}, {image.bit_depth}-bit")

    def _apply(self, choice: int, image: BmpImage) -> None:
        if choice == 3:
            path = self.read("Enter file path to save: ").strip()
            save_image(path, image)
            self.write("Image saved successfully.")
        elif choice == 4:
            self.write(format_info(describe(image)))
        elif choice == 5:
            negative(image)
            self.write("Negative filter applied.")
        elif choice == 6:
            value = self._read_int("Enter brightness adjustment value (can be negative): ")
            if value is not None:
                brightness(image, value)
                self.write(f"Brightness adjusted by {value}.")
        elif choice == 7:
            value = self._read_int("Enter threshold value (0-255): ")
            if value is not None:
                threshold(image, value)
                self.write(f"Threshold applied at {value}.")
        elif choice == 8:
            grayscale(image)
            self.write("Grayscale filter applied.")
        elif choice in FILTER_CHOICES:
            kind = FILTER_CHOICES[choice]
            apply_named_filter(image, kind)
            self.write(f"{kind.value.capitalize()} filter applied.")
        elif choice == 14:
            with warnings.catch_warnings():
                warnings.simplefilter("ignore", DegenerateHistogramWarning)
                applied = equalize(image)
            if applied:
                self.write("Histogram equalization applied.")
            else:
                self.write("Warning: image has a single intensity level, nothing to equalize.")


def main() -> None:
    MenuSession().run()
