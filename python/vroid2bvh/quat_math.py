"""
Quaternion mathematics utilities for rotation operations.

VRoid poses store quaternions scalar-last, so the helpers here take the
components in x, y, z, w order.
"""

import numpy as np


class QuaternionMath:
    """Quaternion and rotation utilities"""

    @staticmethod
    def quat_to_euler_xyz(x: float, y: float, z: float, w: float) -> np.ndarray:
        """
        Convert quaternion to XYZ Euler angles (roll, pitch, yaw).

        - roll = atan2(2*(w*x + y*z), 1-2*(x*x + y*y))
        - pitch = asin(clamp(2*(w*y - z*x), -1, 1))
        - yaw = atan2(2*(w*z + x*y), 1-2*(y*y + z*z))

        The quaternion is not normalized first; a non-unit input still
        yields finite angles.

        Returns:
            Array [roll, pitch, yaw] in radians
        """
        ysqr = y * y

        t0 = 2.0 * (w * x + y * z)
        t1 = 1.0 - 2.0 * (x * x + ysqr)
        roll = np.arctan2(t0, t1)

        # Rounding can push this just past +-1, where asin is undefined
        t2 = np.clip(2.0 * (w * y - z * x), -1.0, 1.0)
        pitch = np.arcsin(t2)

        t3 = 2.0 * (w * z + x * y)
        t4 = 1.0 - 2.0 * (ysqr + z * z)
        yaw = np.arctan2(t3, t4)

        return np.array([roll, pitch, yaw])

    @staticmethod
    def quat_to_euler_xyz_deg(x: float, y: float, z: float, w: float) -> np.ndarray:
        """Same as quat_to_euler_xyz, in degrees"""
        return np.degrees(QuaternionMath.quat_to_euler_xyz(x, y, z, w))
