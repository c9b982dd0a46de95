import numpy as np
import pytest

from bmpedit.buffer import PixelBuffer
from bmpedit.codec import image_from_array
from bmpedit.convolution import (
    PRESETS,
    FilterKind,
    Kernel,
    apply_kernel,
    apply_named_filter,
)
from bmpedit.errors import InvalidParameterError


def _ring_mask(height: int, width: int) -> np.ndarray:
    mask = np.ones((height, width), dtype=bool)
    mask[1:-1, 1:-1] = False
    return mask


@pytest.mark.parametrize("kind", list(FilterKind))
def test_outer_ring_unchanged_on_5x5(kind):
    rng = np.random.default_rng(7)
    original = rng.integers(0, 256, size=(5, 5, 3), dtype=np.uint8)
    image = image_from_array(original)
    apply_named_filter(image, kind)
    ring = _ring_mask(5, 5)
    assert ring.sum() == 16
    np.testing.assert_array_equal(image.pixels[ring], original[ring])


def test_box_blur_interior_mean():
    pixels = np.zeros((5, 5), dtype=np.uint8)
    pixels[2, 2] = 90
    image = image_from_array(pixels)
    apply_named_filter(image, "box")
    np.testing.assert_array_equal(image.pixels[1:4, 1:4], np.full((3, 3), 10))


def test_uniform_image_unchanged_by_blurs():
    pixels = np.full((6, 6, 3), 123, dtype=np.uint8)
    for kind in (FilterKind.BOX, FilterKind.GAUSSIAN, FilterKind.SHARPEN):
        image = image_from_array(pixels)
        apply_named_filter(image, kind)
        np.testing.assert_array_equal(image.pixels, pixels)


def test_outline_on_uniform_image_clears_interior():
    image = image_from_array(np.full((4, 4), 200, dtype=np.uint8))
    apply_named_filter(image, FilterKind.OUTLINE)
    np.testing.assert_array_equal(image.pixels[1:3, 1:3], np.zeros((2, 2)))
    assert image.pixels[0, 0] == 200


def test_reads_from_snapshot_not_updated_neighbours():
    # A sequential in-place pass would feed the new (0) value of (1, 1)
    # into (1, 2); reading the snapshot keeps (1, 2) at the true mean.
    pixels = np.array(
        [
            [0, 0, 0, 0],
            [0, 90, 90, 0],
            [0, 0, 0, 0],
        ],
        dtype=np.uint8,
    )
    buffer = PixelBuffer.from_array(pixels)
    apply_kernel(buffer, PRESETS[FilterKind.BOX])
    assert buffer.get(1, 1) == 20
    assert buffer.get(1, 2) == 20


def test_results_clamped_to_byte_range():
    pixels = np.full((3, 3), 100, dtype=np.uint8)
    pixels[1, 1] = 250
    image = image_from_array(pixels)
    apply_named_filter(image, FilterKind.SHARPEN)
    # 5*250 - 4*100 = 850
    assert image.pixels[1, 1] == 255
    apply_named_filter(image, FilterKind.OUTLINE)
    assert image.pixels[1, 1] == 255

    dark = image_from_array(np.full((3, 3), 100, dtype=np.uint8))
    dark.pixels[1, 1] = 0
    apply_named_filter(dark, FilterKind.SHARPEN)
    assert dark.pixels[1, 1] == 0


def test_channels_filtered_independently():
    pixels = np.zeros((3, 3, 3), dtype=np.uint8)
    pixels[..., 0] = 90
    pixels[1, 1, 2] = 180
    image = image_from_array(pixels)
    apply_named_filter(image, FilterKind.BOX)
    assert image.buffer.get(1, 1) == (90, 0, 20)


def test_generic_5x5_kernel():
    kernel = Kernel.from_rows(np.ones((5, 5)), scale=1 / 25)
    buffer = PixelBuffer.from_array(np.full((5, 5), 50, dtype=np.uint8))
    buffer.set(2, 2, 75)
    apply_kernel(buffer, kernel)
    assert buffer.get(2, 2) == 51
    assert buffer.get(1, 1) == 50


def test_image_smaller_than_kernel_rejected():
    with pytest.raises(InvalidParameterError):
        apply_named_filter(image_from_array(np.zeros((2, 5), dtype=np.uint8)), FilterKind.BOX)


def test_kernel_validation():
    with pytest.raises(InvalidParameterError):
        Kernel.from_rows([[1, 1], [1, 1]])
    with pytest.raises(InvalidParameterError):
        Kernel.from_rows([[1, 1, 1], [1, 1, 1]])
    with pytest.raises(InvalidParameterError):
        apply_kernel(PixelBuffer(3, 3), Kernel.from_rows([[1]]))


def test_unknown_filter_name():
    with pytest.raises(InvalidParameterError):
        apply_named_filter(image_from_array(np.zeros((3, 3), dtype=np.uint8)), "median")
