import numpy as np

from art2img.core_types import PostprocessOptions, RgbaImage
from art2img.postprocess import (
    apply_matte_hygiene,
    box_blur_alpha_plane,
    clean_transparent_pixels,
    erode_alpha_plane,
    postprocess,
    premultiply_alpha,
)


def _image(pixels, width, height):
    return RgbaImage(width, height, bytearray(bytes(pixels)))


def test_transparent_cleanup_example():
    img = _image([10, 20, 30, 0, 0, 255, 0, 255], 2, 1)
    postprocess(img, PostprocessOptions(apply_transparency_fix=True))
    assert list(img.data) == [128, 128, 128, 0, 0, 255, 0, 255]


def test_cleanup_on_raw_buffer():
    buf = bytearray([1, 2, 3, 0, 4, 5, 6, 7])
    clean_transparent_pixels(buf, 2, 1)
    assert list(buf) == [128, 128, 128, 0, 4, 5, 6, 7]


def test_premultiply_pass():
    img = _image([200, 100, 50, 0, 255, 255, 255, 128, 9, 8, 7, 255], 3, 1)
    premultiply_alpha(img)
    assert list(img.data) == [0, 0, 0, 0, 128, 128, 128, 128, 9, 8, 7, 255]


def test_matte_uniform_alpha_is_unchanged():
    rgba = np.full((5, 6, 4), 255, dtype=np.uint8)
    rgba[..., :3] = 40
    img = RgbaImage.from_array(rgba)
    before = bytes(img.data)
    apply_matte_hygiene(img)
    assert bytes(img.data) == before


def test_matte_twice_equals_once_for_uniform_alpha():
    for w, h, alpha in ((3, 3, 255), (4, 7, 90), (9, 5, 1)):
        rgba = np.zeros((h, w, 4), dtype=np.uint8)
        rgba[..., 3] = alpha
        rgba[1:-1, 1:-1, :3] = (10, 200, 30)
        rgba[0, :, :3] = (250, 5, 5)
        rgba[:, 0, :3] = (5, 5, 250)
        once = RgbaImage.from_array(rgba)
        apply_matte_hygiene(once)
        twice = RgbaImage.from_array(rgba)
        apply_matte_hygiene(twice)
        apply_matte_hygiene(twice)
        assert bytes(twice.data) == bytes(once.data)
        assert (once.as_array()[..., 3] == alpha).all()


def test_matte_small_images_untouched():
    for w, h in ((2, 5), (5, 2), (1, 1)):
        rgba = np.zeros((h, w, 4), dtype=np.uint8)
        rgba[..., 3] = np.arange(w * h, dtype=np.uint8).reshape(h, w) * 20
        img = RgbaImage.from_array(rgba)
        before = bytes(img.data)
        postprocess(img, PostprocessOptions(apply_transparency_fix=False, sanitize_matte=True))
        assert bytes(img.data) == before


def test_matte_writes_alpha_only():
    rgba = np.zeros((3, 3, 4), dtype=np.uint8)
    rgba[..., 0] = 77
    rgba[..., 3] = 255
    rgba[1, 1, 3] = 0
    img = RgbaImage.from_array(rgba)
    apply_matte_hygiene(img)
    out = img.as_array()
    assert (out[..., 0] == 77).all()
    # center: erosion keeps 0, blur = 8 * 255 // 9
    assert out[1, 1, 3] == (8 * 255) // 9
    # border untouched
    assert out[0, 0, 3] == 255


def test_erosion_is_four_connected():
    alpha = np.full((5, 5), 255, dtype=np.uint8)
    alpha[0, 0] = 0  # diagonal to (1, 1) only
    alpha[2, 1] = 10
    out = erode_alpha_plane(alpha)
    assert out[1, 1] == 10  # south neighbour (2,1) is 10
    assert out[2, 2] == 10  # west neighbour
    assert out[3, 3] == 255
    assert out[0, 0] == 0


def test_box_blur_interior_only():
    alpha = np.zeros((3, 4), dtype=np.uint8)
    alpha[:, :] = 90
    alpha[1, 1] = 0
    out = box_blur_alpha_plane(alpha)
    assert out[1, 1] == (8 * 90) // 9
    assert out[1, 2] == (8 * 90) // 9
    assert out[0].tolist() == [90, 90, 90, 90]


def test_matte_on_raw_buffer():
    buf = bytearray([0, 0, 0, 255] * 9)
    buf[4 * 4 + 3] = 0
    apply_matte_hygiene(buf, 3, 3)
    assert buf[4 * 4 + 3] == (8 * 255) // 9


def test_postprocess_order_cleanup_before_premultiply():
    img = _image([50, 60, 70, 0, 200, 100, 0, 51], 2, 1)
    postprocess(
        img, PostprocessOptions(apply_transparency_fix=True, premultiply_alpha=True)
    )
    assert list(img.data[:4]) == [0, 0, 0, 0]
    assert list(img.data[4:]) == [(200 * 51 + 127) // 255, (100 * 51 + 127) // 255, 0, 51]


def test_postprocess_empty_image_is_noop():
    img = RgbaImage(0, 0)
    postprocess(img, PostprocessOptions(sanitize_matte=True, premultiply_alpha=True))
    assert img.data == bytearray()


def test_all_disabled_leaves_image():
    img = _image([1, 2, 3, 0], 1, 1)
    postprocess(img, PostprocessOptions(apply_transparency_fix=False))
    assert list(img.data) == [1, 2, 3, 0]
