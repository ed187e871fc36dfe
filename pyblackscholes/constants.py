"""
pyblackscholes.constants
~~~~~~~~~~~~~~~~~~~~~~~~

Numerical and market constants shared across the package.

:copyright: © 2017 Gammon Capital LLC
:license: MIT, see LICENSE for more details.
"""

from math import sqrt
from sys import float_info

DBL_MIN, DBL_MAX = float_info.min, float_info.max
DBL_EPSILON = float_info.epsilon

SQRT_DBL_EPSILON = sqrt(DBL_EPSILON)
FOURTH_ROOT_DBL_EPSILON = sqrt(SQRT_DBL_EPSILON)
EIGHTH_ROOT_DBL_EPSILON = sqrt(FOURTH_ROOT_DBL_EPSILON)
SIXTEENTH_ROOT_DBL_EPSILON = sqrt(EIGHTH_ROOT_DBL_EPSILON)
SQRT_DBL_MIN = sqrt(DBL_MIN)
SQRT_DBL_MAX = sqrt(DBL_MAX)

ONE_OVER_SQRT_TWO = 0.7071067811865475244008443621048490392848359376887
ONE_OVER_SQRT_TWO_PI = 0.3989422804014326779399460599343818684758586311649
SQRT_TWO_PI = 2.506628274631000502415765284811045253006986740610

TWO_PI = 6.283185307179586476925286766559005768394338798750
SQRT_PI_OVER_TWO = 1.253314137315500251207882642405522626503493370305  # sqrt(pi/2) to avoid misinterpretation.
SQRT_THREE = 1.732050807568877293527446341505872366942805253810
SQRT_ONE_OVER_THREE = 0.577350269189625764509148780501957455647601751270
TWO_PI_OVER_SQRT_TWENTY_SEVEN = (
    1.209199576156145233729385505094770488189377498728  # 2*pi/sqrt(27)
)
PI_OVER_SIX = 0.523598775598298873077107230546583814032861566563

DAYS_PER_YEAR = 365.25

# Modified Corrado-Miller correction coefficients (Pluciennik, 2007).
CORRADO_MILLER_A = 4.62627532e-01
CORRADO_MILLER_B = -1.16851917e-02
CORRADO_MILLER_C = 9.63541838e-04
CORRADO_MILLER_D = 7.53502261e-05
CORRADO_MILLER_E = 1.42451646e-05
CORRADO_MILLER_F = -2.10237683e-05
