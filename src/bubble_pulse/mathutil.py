def lerp(a, b, f):
    return a + (b - a) * f


def lerp_color(c0, c1, f):
    return (
        int(c0[0] * (1 - f) + c1[0] * f),
        int(c0[1] * (1 - f) + c1[1] * f),
        int(c0[2] * (1 - f) + c1[2] * f),
    )


def map_range(value, in_lo, in_hi, out_lo, out_hi):
    """Linear remap without clamping."""
    return out_lo + (value - in_lo) * (out_hi - out_lo) / (in_hi - in_lo)


def clamp(value, lo=0.0, hi=1.0):
    return max(lo, min(hi, value))


def ease_in_out_cubic(t):
    if t < 0.5:
        return 4 * t * t * t
    return 1 - pow(-2 * t + 2, 3) / 2
