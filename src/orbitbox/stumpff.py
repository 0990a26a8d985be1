'''Orbital mechanics toolbox
Stumpff functions for use with universal variables'''

import math


def stumpff_c(z: float) -> float:
    """
    Stumpff function C(z).

    C(z) = (1 - cos√z)/z for z > 0, (cosh√-z - 1)/(-z) for z < 0, 1/2 at z = 0.
    """
    if z > 0:
        return (1 - math.cos(math.sqrt(z))) / z
    if z < 0:
        return (math.cosh(math.sqrt(-z)) - 1) / (-z)
    return 0.5


def stumpff_s(z: float) -> float:
    """
    Stumpff function S(z).

    S(z) = (√z - sin√z)/√z³ for z > 0, (sinh√-z - √-z)/√-z³ for z < 0,
    1/6 at z = 0.
    """
    if z > 0:
        sq = math.sqrt(z)
        return (sq - math.sin(sq)) / sq**3
    if z < 0:
        sq = math.sqrt(-z)
        return (math.sinh(sq) - sq) / sq**3
    return 1.0 / 6.0
