import numpy as np
import cv2

def to_uint8(img: np.ndarray) -> np.ndarray:
    """Reduce 16-bit or float images to 8 bits per channel, alpha included."""
    if img.dtype == np.uint8:
        return img
    if img.dtype == np.uint16:
        return (img >> 8).astype(np.uint8)
    # float images decode as 0..1
    return np.clip(np.rint(img * 255.0), 0, 255).astype(np.uint8)

def bytes_to_cv2(b: bytes) -> np.ndarray:
    arr = np.asarray(bytearray(b), dtype=np.uint8)
    # keep alpha so transparent pixels can be dropped before clustering
    img = cv2.imdecode(arr, cv2.IMREAD_UNCHANGED)
    if img is None:
        raise ValueError("Failed to decode image data")
    return to_uint8(img)

def downscale(img: np.ndarray, max_width: int) -> np.ndarray:
    """Shrink to ``max_width`` keeping aspect ratio. Never enlarges."""
    h, w = img.shape[:2]
    if max_width <= 0 or w <= max_width:
        return img
    new_h = max(1, round(h * max_width / w))
    return cv2.resize(img, (max_width, new_h), interpolation=cv2.INTER_AREA)

def opaque_rgb_pixels(img: np.ndarray, max_width: int = 200) -> np.ndarray:
    """Downscale an OpenCV image and return its non-transparent pixels as (N, 3) RGB uint8."""
    img = downscale(to_uint8(img), max_width)
    if img.ndim == 2:
        return cv2.cvtColor(img, cv2.COLOR_GRAY2RGB).reshape(-1, 3)
    if img.shape[2] == 4:
        alpha = img[:, :, 3].reshape(-1)
        rgb = cv2.cvtColor(img, cv2.COLOR_BGRA2RGB).reshape(-1, 3)
        return rgb[alpha > 0]
    return cv2.cvtColor(img, cv2.COLOR_BGR2RGB).reshape(-1, 3)
