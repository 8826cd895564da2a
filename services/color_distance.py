from __future__ import annotations
import math

from domain.dtos import Lab

_POW25_7 = 25.0 ** 7


def _hue_deg(b: float, a_prime: float) -> float:
    if a_prime == 0.0 and b == 0.0:
        return 0.0
    h = math.degrees(math.atan2(b, a_prime))
    return h + 360.0 if h < 0.0 else h


def ciede2000(l1: Lab, l2: Lab) -> float:
    """CIEDE2000 color difference (kL = kC = kH = 1).

    Follows Sharma, Wu & Dalal (2005), including their conventions for
    achromatic colors: hue is 0 when chroma is 0, and the hue difference and
    mean hue fall back to the zero-chroma forms when either C' is 0.
    """
    L1, a1, b1 = l1.L, l1.a, l1.b
    L2, a2, b2 = l2.L, l2.a, l2.b

    c_bar = (math.hypot(a1, b1) + math.hypot(a2, b2)) / 2.0
    c_bar7 = c_bar ** 7
    g = 0.5 * (1.0 - math.sqrt(c_bar7 / (c_bar7 + _POW25_7)))

    a1p = (1.0 + g) * a1
    a2p = (1.0 + g) * a2
    c1p = math.hypot(a1p, b1)
    c2p = math.hypot(a2p, b2)
    h1p = _hue_deg(b1, a1p)
    h2p = _hue_deg(b2, a2p)

    dLp = L2 - L1
    dCp = c2p - c1p

    chroma_product = c1p * c2p
    if chroma_product == 0.0:
        dhp = 0.0
    else:
        dhp = h2p - h1p
        if dhp > 180.0:
            dhp -= 360.0
        elif dhp < -180.0:
            dhp += 360.0
    dHp = 2.0 * math.sqrt(chroma_product) * math.sin(math.radians(dhp / 2.0))

    Lp_bar = (L1 + L2) / 2.0
    Cp_bar = (c1p + c2p) / 2.0

    if chroma_product == 0.0:
        hp_bar = h1p + h2p
    elif abs(h1p - h2p) <= 180.0:
        hp_bar = (h1p + h2p) / 2.0
    elif h1p + h2p < 360.0:
        hp_bar = (h1p + h2p + 360.0) / 2.0
    else:
        hp_bar = (h1p + h2p - 360.0) / 2.0

    t = (1.0
         - 0.17 * math.cos(math.radians(hp_bar - 30.0))
         + 0.24 * math.cos(math.radians(2.0 * hp_bar))
         + 0.32 * math.cos(math.radians(3.0 * hp_bar + 6.0))
         - 0.20 * math.cos(math.radians(4.0 * hp_bar - 63.0)))

    d_theta = 30.0 * math.exp(-(((hp_bar - 275.0) / 25.0) ** 2))
    cp_bar7 = Cp_bar ** 7
    r_c = 2.0 * math.sqrt(cp_bar7 / (cp_bar7 + _POW25_7))

    l_dev = (Lp_bar - 50.0) ** 2
    s_l = 1.0 + (0.015 * l_dev) / math.sqrt(20.0 + l_dev)
    s_c = 1.0 + 0.045 * Cp_bar
    s_h = 1.0 + 0.015 * Cp_bar * t
    r_t = -math.sin(math.radians(2.0 * d_theta)) * r_c

    lt = dLp / s_l
    ct = dCp / s_c
    ht = dHp / s_h
    # rounding can push the sum a hair below zero for identical colors
    return math.sqrt(max(0.0, lt * lt + ct * ct + ht * ht + r_t * ct * ht))
